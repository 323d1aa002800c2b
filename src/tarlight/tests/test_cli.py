"""Tests for the ``tarlight`` command-line front end."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"

import pytest

from tarlight import Tar, __version__, load_archive
from tarlight._cli import main


@pytest.fixture()
def sample_archive(tmp_path):
    tar = Tar()
    tar.add_text("hello.txt", "Hello, World")
    tar.add_text("docs/readme.md", "# readme\n")
    path = tmp_path / "sample.tar"
    path.write_bytes(tar.to_bytes())
    return path


class TestPack:
    def test_pack_files_and_directories(self, tmp_path, capsys):
        src = tmp_path / "src"
        (src / "docs").mkdir(parents=True)
        (src / "docs" / "a.txt").write_text("alpha")
        (src / "b.txt").write_text("beta")
        out = tmp_path / "bundle.tgz"

        rc = main(["pack", str(out), str(src / "b.txt"), str(src / "docs")])

        assert rc == 0
        assert capsys.readouterr().out == f"Created tar archive: {out}\n"
        assert load_archive(out).names() == ["b.txt", "docs/a.txt"]

    def test_pack_missing_input_is_skipped(self, tmp_path, capsys):
        out = tmp_path / "bundle.tar"
        rc = main(["pack", str(out), str(tmp_path / "missing.txt")])
        assert rc == 0
        assert out.read_bytes() == bytes(1024)


class TestList:
    def test_list_table(self, sample_archive, capsys):
        assert main(["list", str(sample_archive)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            f"Files in {sample_archive}:",
            "      Size  Name",
            "-" * 50,
            "        12  hello.txt",
            "         9  docs/readme.md",
            "",
            "Total: 2 file(s)",
        ]

    def test_list_verify(self, sample_archive, capsys):
        assert main(["list", "--verify", str(sample_archive)]) == 0
        out = capsys.readouterr().out
        assert "Checksum" in out
        assert "BAD" not in out
        assert sum(" ok " in line for line in out.splitlines()) == 2

    def test_list_verify_flags_damage(self, sample_archive, capsys):
        data = bytearray(sample_archive.read_bytes())
        data[0] = ord("j")  # hello.txt -> jello.txt, checksum now stale
        sample_archive.write_bytes(bytes(data))
        assert main(["list", "--verify", str(sample_archive)]) == 0
        out = capsys.readouterr().out
        assert f"{'BAD':<8}  jello.txt" in out

    def test_list_missing_archive(self, tmp_path, capsys):
        assert main(["list", str(tmp_path / "nope.tar")]) == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestUnpack:
    def test_unpack(self, sample_archive, tmp_path, capsys):
        dest = tmp_path / "out"
        assert main(["unpack", str(sample_archive), str(dest)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "Extracted: hello.txt",
            "Extracted: docs/readme.md",
            f"Extraction complete to: {dest}",
        ]
        assert (dest / "docs" / "readme.md").read_text() == "# readme\n"

    def test_unpack_skip_existing(self, sample_archive, tmp_path, capsys):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "hello.txt").write_text("keep")
        rc = main(["unpack", "--overwrite", "skip", str(sample_archive), str(dest)])
        assert rc == 0
        assert "Extracted: hello.txt" not in capsys.readouterr().out
        assert (dest / "hello.txt").read_text() == "keep"

    def test_unpack_reject_existing(self, sample_archive, tmp_path, capsys):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "hello.txt").write_text("keep")
        rc = main(["unpack", "--overwrite", "reject", str(sample_archive), str(dest)])
        assert rc == 1
        assert "already exists" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "answer, expected", [("y", "Hello, World"), ("n", "keep")]
    )
    def test_unpack_prompt(
        self, sample_archive, tmp_path, monkeypatch, capsys, answer, expected
    ):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "hello.txt").write_text("keep")
        monkeypatch.setattr("builtins.input", lambda _prompt: answer)
        rc = main(["unpack", "--overwrite", "prompt", str(sample_archive), str(dest)])
        assert rc == 0
        assert (dest / "hello.txt").read_text() == expected

    def test_unpack_prompt_eof_declines(self, sample_archive, tmp_path, monkeypatch):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "hello.txt").write_text("keep")

        def eof(_prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", eof)
        main(["unpack", "--overwrite", "prompt", str(sample_archive), str(dest)])
        assert (dest / "hello.txt").read_text() == "keep"

    def test_unpack_traversal_fails(self, traversal_archive, tmp_path, capsys):
        rc = main(["unpack", traversal_archive, str(tmp_path / "out")])
        assert rc == 1
        assert "traversal" in capsys.readouterr().err


class TestParser:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert capsys.readouterr().out.strip() == f"tarlight {__version__}"

    def test_command_required(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_bad_overwrite_choice(self, sample_archive, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["unpack", "--overwrite", "maybe", str(sample_archive), str(tmp_path)])
        assert exc.value.code == 2
