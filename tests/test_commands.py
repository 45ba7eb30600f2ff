from __future__ import annotations

import random

import pytest

from climber_registry.core.commands import Command, Interpreter, parse_command_line
from climber_registry.core.csv_store import load_climbers
from climber_registry.core.models import Role
from climber_registry.core.store import ClimberStore
from conftest import RECORD_ANSWERS, Feed, make_climber, output


def _interpreter(out, tmp_path, *climbers, answers=()):
    store = ClimberStore(climbers, rng=random.Random(1))
    return Interpreter(store, tmp_path / "roster.csv", ask=Feed(*answers), out=out)


@pytest.mark.parametrize(
    "line, command, argument",
    [
        ("help", Command.HELP, ""),
        ("  SHOW  ", Command.SHOW, ""),
        ("update 1234", Command.UPDATE, "1234"),
        ("execute_script  my script.txt ", Command.EXECUTE_SCRIPT, "my script.txt"),
        ("Filter_Role Medic", Command.FILTER_ROLE, "Medic"),
        ("filter_roles Medic", None, "Medic"),
        ("group_by_role_extra", None, ""),
    ],
)
def test_parse_command_line(line, command, argument):
    parsed = parse_command_line(line)
    assert parsed.command is command
    assert parsed.argument == argument


def test_parse_blank_line():
    assert parse_command_line("   ") is None


def test_unknown_command(out, tmp_path):
    interp = _interpreter(out, tmp_path)
    assert interp.execute("fly away") is True
    assert "unknown command" in output(out)


def test_exit_stops(out, tmp_path):
    assert _interpreter(out, tmp_path).execute("exit") is False


def test_help_lists_commands(out, tmp_path):
    _interpreter(out, tmp_path).execute("help")
    text = output(out)
    for name in ("insert", "remove_key", "execute_script", "group_by_role", "count"):
        assert name in text


def test_info_and_count(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(1), make_climber(2))
    interp.execute("info")
    interp.execute("count")
    text = output(out)
    assert "collection type: dict[int, Climber]" in text
    assert "initialized at:" in text
    assert "elements: 2" in text
    assert text.rstrip().endswith("2")


def test_show_orders_by_id_and_placeholder(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(3000), make_climber(1000))
    interp.execute("show")
    lines = output(out).splitlines()
    assert lines[0].startswith("1000: ")
    assert lines[1].startswith("3000: ")

    interp.execute("clear")
    interp.execute("show")
    assert output(out).splitlines()[-1] == "(empty)"


def test_insert_assigns_fresh_id(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(1500), answers=RECORD_ANSWERS)
    interp.execute("insert")
    assert interp.store.count() == 2
    new = [c for c in interp.store.all() if c.id != 1500][0]
    assert 1000 <= new.id < 9999
    assert new.name == "Anna"
    assert "added: " in output(out)


def test_update_replaces_record_and_keeps_id(out, tmp_path):
    old = make_climber(1500, role=Role.LEADER)
    interp = _interpreter(out, tmp_path, old, answers=RECORD_ANSWERS)
    interp.execute("update 1500")
    updated = interp.store.get(1500)
    assert updated.name == "Anna"
    assert updated.role is Role.MEDIC
    assert updated.created_at == old.created_at
    assert interp.store.count() == 1


def test_update_unknown_id_does_not_prompt(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(1500), answers=RECORD_ANSWERS)
    interp.execute("update 1501")
    interp.execute("update abc")
    interp.execute("update")
    assert output(out).count("no such id") == 2
    assert "usage: update id" in output(out)
    assert interp.ask.prompts == []
    assert interp.store.get(1500).name == "climber 1500"


def test_remove_key(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(1500), make_climber(1600))
    interp.execute("remove_key 1500")
    assert interp.store.count() == 1
    interp.execute("remove_key 1500")
    interp.execute("remove_key nope")
    assert interp.store.count() == 1
    text = output(out)
    assert "removed: 1500" in text
    assert text.count("no such id") == 2


def test_save_writes_configured_file(out, tmp_path):
    interp = _interpreter(out, tmp_path, make_climber(1500), make_climber(1600))
    interp.execute("save")
    assert f"saved to {tmp_path / 'roster.csv'}" in output(out)
    reloaded = ClimberStore()
    assert load_climbers(tmp_path / "roster.csv", reloaded).loaded == 2


def test_filter_role(out, tmp_path):
    climbers = [
        make_climber(5000, role=Role.MEDIC),
        make_climber(1000, role=Role.LEADER),
        make_climber(3000, role=Role.MEDIC),
        make_climber(4000, role=Role.SUPPORT),
        make_climber(2000, role=Role.CLIMBER),
    ]
    interp = _interpreter(out, tmp_path, *climbers)
    interp.execute("filter_role Medic")
    lines = output(out).splitlines()
    assert [line.split(":")[0] for line in lines] == ["3000", "5000"]

    interp.execute("filter_role Wizard")
    interp.execute("filter_role")
    text = output(out)
    assert "unknown role" in text
    assert "usage: filter_role {Leader|Medic|Climber|Support}" in text


def test_group_by_role(out, tmp_path):
    interp = _interpreter(out, tmp_path)
    interp.execute("group_by_role")
    assert output(out).strip() == "(empty)"

    interp.store.insert(make_climber(1002, role=Role.MEDIC))
    interp.store.insert(make_climber(1001, role=Role.SUPPORT))
    interp.store.insert(make_climber(1003, role=Role.MEDIC))
    interp.execute("group_by_role")
    text = output(out)
    assert "Support: 1 pcs." in text
    assert "Medic: 2 pcs." in text
    assert text.index("Support:") < text.index("Medic:")
    assert "  1003: " in text


def test_unexpected_errors_are_reported_inline(out, tmp_path, monkeypatch):
    interp = _interpreter(out, tmp_path, make_climber(1))

    def boom():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(interp.store, "all", boom)
    assert interp.execute("show") is True
    assert "[error] disk on fire" in output(out)
    assert interp.execute("count") is True


def test_end_of_input_during_insert_propagates(out, tmp_path):
    interp = _interpreter(out, tmp_path, answers=["Anna"])
    with pytest.raises(EOFError):
        interp.execute("insert")
    assert interp.store.count() == 0


def test_script_stops_after_exit(out, tmp_path):
    script = tmp_path / "admin.txt"
    script.write_text(
        "# housekeeping\n\ncount\nshow\nclear\ncount\nexit\nremove_key 1\nbogus\n",
        encoding="utf-8",
    )
    interp = _interpreter(out, tmp_path, make_climber(1), make_climber(2))
    assert interp.execute(f"execute_script {script}") is True
    text = output(out)
    assert "[exec] running" in text
    assert "> count" in text
    assert "> exit" in text
    assert "remove_key" not in text
    assert "unknown command" not in text
    assert interp.store.count() == 0


def test_script_missing_file(out, tmp_path):
    interp = _interpreter(out, tmp_path)
    interp.execute(f"execute_script {tmp_path / 'missing.txt'}")
    interp.execute("execute_script")
    text = output(out)
    assert "file not found" in text
    assert "usage: execute_script file_name" in text


def test_nested_scripts_and_self_reference(out, tmp_path):
    inner = tmp_path / "inner.txt"
    outer = tmp_path / "outer.txt"
    inner.write_text(f"remove_key 1\nexecute_script {outer}\nexit\nremove_key 2\n", encoding="utf-8")
    outer.write_text(f"execute_script {inner}\nremove_key 3\n", encoding="utf-8")
    interp = _interpreter(out, tmp_path, make_climber(1), make_climber(2), make_climber(3))

    assert interp.execute(f"execute_script {outer}") is True
    assert [c.id for c in interp.store.all()] == [2, 3]
    assert "already running" in output(out)


def test_script_prompts_read_from_line_source(out, tmp_path):
    script = tmp_path / "add.txt"
    script.write_text("insert\ncount\n", encoding="utf-8")
    interp = _interpreter(out, tmp_path, answers=RECORD_ANSWERS)
    interp.execute(f"execute_script {script}")
    assert interp.store.count() == 1
    assert output(out).rstrip().endswith("1")
