import pytest

from cactiinstaller.errors import InstallerError, OperatorExit
from cactiinstaller.services.prompts import ScriptedPrompter
from cactiinstaller.services.schema import SchemaSelector


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


@pytest.fixture
def layout(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    (home / "backup.sql").write_text("-- backup\n", encoding="utf-8")
    (home / "alpha.sql").write_text("-- alpha\n", encoding="utf-8")
    (home / "notes.txt").write_text("not a schema\n", encoding="utf-8")
    default_schema = tmp_path / "cacti" / "cacti.sql"
    default_schema.parent.mkdir()
    default_schema.write_text("-- cacti\n", encoding="utf-8")
    return home, default_schema


def _selector(answers):
    return SchemaSelector(DummyLogger(), DummyConsole(), ScriptedPrompter({"schema": answers}))


def test_discover_lists_sql_files_sorted(layout):
    home, _ = layout

    found = _selector([]).discover(str(home))

    assert found == [str(home / "alpha.sql"), str(home / "backup.sql")]


@pytest.mark.parametrize("answer", ["default", ""])
def test_default_answer_uses_bundled_schema(layout, answer):
    home, default_schema = layout

    choice = _selector([answer]).select(str(home), str(default_schema))

    assert choice.path == str(default_schema)
    assert choice.origin == "default"


def test_numeric_answer_selects_discovered_file(layout):
    home, default_schema = layout

    choice = _selector(["2"]).select(str(home), str(default_schema))

    assert choice.path == str(home / "backup.sql")
    assert choice.origin == "discovered"


def test_custom_path_is_accepted(layout, tmp_path):
    home, default_schema = layout
    custom = tmp_path / "custom.sql"
    custom.write_text("-- custom\n", encoding="utf-8")

    choice = _selector([str(custom)]).select(str(home), str(default_schema))

    assert choice.path == str(custom)
    assert choice.origin == "custom"


def test_invalid_answers_reprompt_until_file_exists(layout, tmp_path):
    home, default_schema = layout
    answers = [str(tmp_path / "missing.sql"), "7", "0", "default"]
    selector = _selector(answers)

    choice = selector.select(str(home), str(default_schema))

    assert choice.path == str(default_schema)
    assert not selector.prompter.answers["schema"]


def test_exit_stops_the_install(layout):
    home, default_schema = layout

    with pytest.raises(OperatorExit):
        _selector(["exit"]).select(str(home), str(default_schema))


def test_missing_default_keeps_prompting(layout, tmp_path):
    home, _ = layout

    with pytest.raises(InstallerError, match="No answer provided"):
        _selector(["default"]).select(str(home), str(tmp_path / "absent" / "cacti.sql"))
