from __future__ import annotations

from sysscan import discover


def test_edit_cycle_keeps_registrations_in_sync(crate, write_source, touch):
    first = discover(crate)
    assert [reg.path_text for reg in first.registrations][-1] == "crate::net::client::poll"

    write_source(
        crate / "src" / "net" / "client.rs",
        "#[system]\npub fn poll() {}\n\n#[system(Early)]\npub fn connect() {}\n",
        1_800_000_000_000_000_000,
    )
    second = discover(crate)
    assert [(reg.path_text, reg.stage) for reg in second.registrations][-2:] == [
        ("crate::net::client::poll", None),
        ("crate::net::client::connect", "Early"),
    ]
    assert second.scanned == [crate.resolve() / "src" / "net" / "client.rs"]

    touch(crate / "src" / "net" / "mod.rs", 1_900_000_000_000_000_000)
    third = discover(crate)
    assert third.registrations == second.registrations
    assert third.scanned == [crate.resolve() / "src" / "net" / "mod.rs"]
