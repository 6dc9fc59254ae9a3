"""
Unit tests for qrsites/cli/

Coverage plan
─────────────
arg parsing   → generate / list subcommands, global flags
list command  → empty store, populated store
generate cmd  → prints record + image path
main()        → exit codes, env vs flag precedence, error reporting
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse(args: list[str]):
    """Call the CLI argument parser and return the parsed namespace."""
    from qrsites.cli.main import build_parser
    parser = build_parser()
    return parser.parse_args(args)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("QRSITES_STORE_PATH", "QRSITES_IMAGE_DIR", "QRSITES_LOCK_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def store(tmp_path):
    """Fresh RecordStore for CLI command tests."""
    from qrsites.store.db import RecordStore
    return RecordStore(str(tmp_path / "BD.txt"))


# ─────────────────────────────────────────────────────────────────────────────
# 1. Argument parsing
# ─────────────────────────────────────────────────────────────────────────────

class TestArgParsing:

    def test_generate_subcommand_parses_name_and_url(self):
        ns = _parse(["generate", "--name", "Acme", "--url", "acme.test"])
        assert ns.subcommand == "generate"
        assert ns.name == "Acme"
        assert ns.url == "acme.test"

    def test_generate_requires_name(self):
        with pytest.raises(SystemExit):
            _parse(["generate", "--url", "acme.test"])

    def test_global_flags_default_to_none(self):
        ns = _parse(["list"])
        assert ns.store is None
        assert ns.image_dir is None
        assert ns.lock_timeout is None
        assert ns.debug is False

    def test_list_strict_flag(self):
        ns = _parse(["list", "--strict"])
        assert ns.subcommand == "list"
        assert ns.strict is True

    def test_lock_timeout_parsed_as_float(self):
        ns = _parse(["--lock-timeout", "2.5", "list"])
        assert ns.lock_timeout == 2.5


# ─────────────────────────────────────────────────────────────────────────────
# 2. list command
# ─────────────────────────────────────────────────────────────────────────────

class TestListCommand:

    def test_list_empty_store_outputs_zero_records(self, store, capsys):
        from qrsites.cli.main import cmd_list
        cmd_list(store=store)
        assert "0 records found." in capsys.readouterr().out

    def test_list_with_records_prints_in_store_order(self, store, capsys):
        from qrsites.cli.main import cmd_list
        store.upsert("Beta", "https://b.test", "qr_Beta.png")
        store.upsert("Alpha", "https://a.test", "qr_Alpha.png")
        cmd_list(store=store)
        out = capsys.readouterr().out
        assert "Alpha" in out and "qr_Beta.png" in out
        assert out.index("Beta") < out.index("Alpha")


# ─────────────────────────────────────────────────────────────────────────────
# 3. generate command
# ─────────────────────────────────────────────────────────────────────────────

class TestGenerateCommand:

    def test_generate_prints_record_and_image(self, store, tmp_path, capsys):
        from qrsites.cli.main import cmd_generate
        from qrsites.generator import SiteGenerator

        class _Encoder:
            def encode(self, data, path):
                path.write_bytes(b"png")

        gen = SiteGenerator(store, str(tmp_path / "image"), encoder=_Encoder())
        result = cmd_generate(gen, name="Acme", url="acme.test")
        out = capsys.readouterr().out
        assert "Acme / https://acme.test / qr_Acme.png" in out
        assert str(result.image_path) in out


# ─────────────────────────────────────────────────────────────────────────────
# 4. main()
# ─────────────────────────────────────────────────────────────────────────────

class TestMain:

    def test_no_subcommand_prints_help(self, capsys):
        from qrsites.cli.main import main
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_generate_end_to_end(self, tmp_path):
        from qrsites.cli.main import main
        store_file = tmp_path / "BD.txt"
        image_dir = tmp_path / "image"
        code = main([
            "--store", str(store_file), "--image-dir", str(image_dir),
            "generate", "--name", "Acme", "--url", "acme.test",
        ])
        assert code == 0
        assert store_file.read_text(encoding="utf-8") == (
            "Acme / https://acme.test / qr_Acme.png\n"
        )
        assert (image_dir / "qr_Acme.png").read_bytes()[:4] == b"\x89PNG"

    def test_generate_empty_name_exits_1(self, tmp_path, capsys):
        from qrsites.cli.main import main
        store_file = tmp_path / "BD.txt"
        code = main([
            "--store", str(store_file), "--image-dir", str(tmp_path / "image"),
            "generate", "--name", "", "--url", "acme.test",
        ])
        assert code == 1
        assert "Error:" in capsys.readouterr().err
        assert not store_file.exists()

    def test_list_reads_store_from_env(self, tmp_path, monkeypatch, capsys):
        from qrsites.cli.main import main
        store_file = tmp_path / "env.txt"
        store_file.write_text("Env / https://env.test / qr_Env.png\n", encoding="utf-8")
        monkeypatch.setenv("QRSITES_STORE_PATH", str(store_file))
        assert main(["list"]) == 0
        assert "qr_Env.png" in capsys.readouterr().out

    def test_store_flag_overrides_env(self, tmp_path, monkeypatch, capsys):
        from qrsites.cli.main import main
        flag_file = tmp_path / "flag.txt"
        flag_file.write_text("Flag / https://flag.test / qr_Flag.png\n", encoding="utf-8")
        monkeypatch.setenv("QRSITES_STORE_PATH", str(tmp_path / "env.txt"))
        assert main(["--store", str(flag_file), "list"]) == 0
        assert "qr_Flag.png" in capsys.readouterr().out

    def test_list_strict_malformed_exits_1(self, tmp_path, capsys):
        from qrsites.cli.main import main
        store_file = tmp_path / "BD.txt"
        store_file.write_text("garbage\n", encoding="utf-8")
        assert main(["--store", str(store_file), "list", "--strict"]) == 1
        assert "expected 3 fields" in capsys.readouterr().err

    def test_negative_lock_timeout_flag_exits_1_before_generating(self, tmp_path, capsys):
        from qrsites.cli.main import main
        image_dir = tmp_path / "image"
        code = main([
            "--store", str(tmp_path / "BD.txt"), "--image-dir", str(image_dir),
            "--lock-timeout", "-5",
            "generate", "--name", "A", "--url", "a.test",
        ])
        assert code == 1
        assert "--lock-timeout" in capsys.readouterr().err
        assert not image_dir.exists()
        assert not (tmp_path / "BD.txt").exists()

    def test_undecodable_store_exits_1(self, tmp_path, capsys):
        from qrsites.cli.main import main
        store_file = tmp_path / "BD.txt"
        store_file.write_bytes(b"A / https://a.test / qr_\xff.png\n")
        assert main(["--store", str(store_file), "list"]) == 1
        assert "UTF-8" in capsys.readouterr().err

    def test_invalid_env_timeout_exits_1(self, monkeypatch, capsys):
        from qrsites.cli.main import main
        monkeypatch.setenv("QRSITES_LOCK_TIMEOUT", "soon")
        assert main(["list"]) == 1
        assert "QRSITES_LOCK_TIMEOUT" in capsys.readouterr().err
