from doit_core.config.settings import Settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DOIT_CONFIG_FILE", raising=False)
    s = Settings()
    assert s.ollama_base_url == "http://localhost:11434"
    assert s.http_timeout is None
    assert s.tasks_file == "tasks.json"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DOIT_DEFAULT_MODEL", "qwen2.5")
    monkeypatch.setenv("DOIT_OLLAMA_BASE_URL", "http://127.0.0.1:9999/")
    s = Settings()
    assert s.default_model == "qwen2.5"
    assert s.ollama_base_url == "http://127.0.0.1:9999"


def test_yaml_config_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    cfg = tmp_path / "custom.yaml"
    cfg.write_text("tasks_file: my_tasks.json\nlog_level: debug\n", encoding="utf-8")
    monkeypatch.setenv("DOIT_CONFIG_FILE", str(cfg))
    s = Settings()
    assert s.tasks_file == "my_tasks.json"
    assert s.log_level == "DEBUG"


def test_env_beats_yaml(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("default_model: from-yaml\n", encoding="utf-8")
    monkeypatch.setenv("DOIT_DEFAULT_MODEL", "from-env")
    assert Settings().default_model == "from-env"
