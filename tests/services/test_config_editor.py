from cactiinstaller.services.config_editor import ConfigEditorService, KeyValueConfig, PhpConfigFile


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def test_set_replaces_existing_key_with_single_line():
    config = KeyValueConfig("[PHP]\nmemory_limit = 128M\nmax_execution_time = 30\n")

    replaced = config.set("memory_limit", "800M")

    lines = config.render().splitlines()
    assert replaced is True
    assert lines.count("memory_limit = 800M") == 1
    assert [line for line in lines if line.startswith("memory_limit")] == ["memory_limit = 800M"]


def test_set_collapses_duplicate_keys():
    config = KeyValueConfig("memory_limit = 128M\nfoo = bar\nmemory_limit=256M\n")

    config.set("memory_limit", "800M")

    assert config.render() == "memory_limit = 800M\nfoo = bar\n"


def test_set_appends_missing_key_once():
    config = KeyValueConfig("[PHP]\n;memory_limit = 128M\n")

    replaced = config.set("memory_limit", "800M")

    assert replaced is False
    assert config.render() == "[PHP]\n;memory_limit = 128M\nmemory_limit = 800M\n"


def test_set_does_not_match_longer_keys():
    config = KeyValueConfig("memory_limit_extra = 1\n")

    config.set("memory_limit", "800M")

    assert config.get("memory_limit_extra") == "1"
    assert config.get("memory_limit") == "800M"


def test_set_with_unit_delimiter():
    config = KeyValueConfig("[Service]\nUser=apache\nGroup=apache\n", delimiter="=")

    config.set("User", "www-data")
    config.set("Group", "www-data")

    assert config.render() == "[Service]\nUser=www-data\nGroup=www-data\n"


def test_php_config_file_keeps_assignment_prefix():
    config = PhpConfigFile(
        "<?php\n$database_type     = 'mysql';\n$database_default  = 'cacti';\n$url_path = '/cacti/';\n"
    )

    config.set_variable("database_default", "monitoring")
    config.set_variable("url_path", "/")

    rendered = config.render()
    assert "$database_default  = 'monitoring';" in rendered
    assert "$url_path = '/';" in rendered
    assert "$database_type     = 'mysql';" in rendered


def test_php_config_file_escapes_quotes_and_appends_missing():
    config = PhpConfigFile("<?php\n")

    found = config.set_variable("database_password", "it's")

    assert found is False
    assert config.render().endswith("$database_password = 'it\\'s';\n")


def test_update_php_settings_applies_to_every_php_ini(tmp_path):
    fpm_ini = tmp_path / "8.2" / "fpm" / "php.ini"
    cli_ini = tmp_path / "8.2" / "cli" / "php.ini"
    for ini in (fpm_ini, cli_ini):
        ini.parent.mkdir(parents=True)
        ini.write_text("[PHP]\nmemory_limit = 128M\n", encoding="utf-8")
    (tmp_path / "8.2" / "fpm" / "php-fpm.conf").write_text("memory_limit = 1M\n", encoding="utf-8")

    service = ConfigEditorService(logger=DummyLogger(), console=DummyConsole())
    updated = service.update_php_settings(
        str(tmp_path), {"memory_limit": "800M", "date.timezone": "Europe/Berlin"}
    )

    assert updated == sorted([str(cli_ini), str(fpm_ini)])
    for ini in (fpm_ini, cli_ini):
        assert ini.read_text(encoding="utf-8") == (
            "[PHP]\nmemory_limit = 800M\ndate.timezone = Europe/Berlin\n"
        )
    assert (tmp_path / "8.2" / "fpm" / "php-fpm.conf").read_text(encoding="utf-8") == "memory_limit = 1M\n"


def test_update_php_settings_without_ini_files_returns_empty(tmp_path):
    service = ConfigEditorService(logger=DummyLogger(), console=DummyConsole())

    assert service.update_php_settings(str(tmp_path / "missing"), {"memory_limit": "800M"}) == []


def test_set_unit_owner_rewrites_user_and_group(tmp_path):
    unit = tmp_path / "cactid.service"
    unit.write_text(
        "[Unit]\nDescription=Cacti Daemon\n\n[Service]\nUser=apache\nGroup=apache\nExecStart=/usr/bin/php\n",
        encoding="utf-8",
    )

    service = ConfigEditorService(logger=DummyLogger(), console=DummyConsole())
    service.set_unit_owner(str(unit), "www-data", "www-data")

    content = unit.read_text(encoding="utf-8")
    assert "User=www-data\nGroup=www-data\n" in content
    assert "apache" not in content


def test_set_unit_owner_adds_missing_lines_to_service_section(tmp_path):
    unit = tmp_path / "cactid.service"
    unit.write_text(
        "[Unit]\nDescription=Cacti Daemon\n\n"
        "[Service]\nExecStart=/usr/bin/php\n\n"
        "[Install]\nWantedBy=multi-user.target\n",
        encoding="utf-8",
    )

    service = ConfigEditorService(logger=DummyLogger(), console=DummyConsole())
    service.set_unit_owner(str(unit), "www-data", "www-data")

    assert unit.read_text(encoding="utf-8") == (
        "[Unit]\nDescription=Cacti Daemon\n\n"
        "[Service]\nExecStart=/usr/bin/php\nUser=www-data\nGroup=www-data\n\n"
        "[Install]\nWantedBy=multi-user.target\n"
    )


def test_set_in_section_creates_missing_section():
    config = KeyValueConfig("[Unit]\nDescription=Cacti Daemon\n", delimiter="=")

    assert config.set_in_section("Service", "User", "www-data") is False
    assert config.render() == "[Unit]\nDescription=Cacti Daemon\n[Service]\nUser=www-data\n"
