import json

import pytest

import crypt_vault
import ui.prompt

FAST = ["-t", "1", "-m", "8", "-p", "1"]


@pytest.fixture
def run(state_file, capsys):
    def _run(*argv):
        code = crypt_vault.main([argv[0], "--state", str(state_file), *argv[1:]])
        out, err = capsys.readouterr()
        return code, out, err
    return _run


@pytest.fixture
def notes(tmp_path, run):
    src = tmp_path / "notes.txt"
    src.write_bytes(b"hello")
    code, out, _ = run("enc", "-i", str(src), "-o", "notes.txt",
                       "--passphrase", "abc123", "--hint", "my favorite", *FAST)
    assert code == 0
    assert "Successfully encrypted" in out
    return src


def test_scenario_add_and_read(notes, run):
    code, out, _ = run("cat", "notes.txt", "--passphrase", "abc123")
    assert code == 0
    assert out == "hello\n"


def test_scenario_wrong_password_prints_nothing(notes, run):
    code, out, err = run("cat", "notes.txt", "--passphrase", "wrong")
    assert code == 4
    assert out == ""
    assert "Wrong password" in err
    assert "hello" not in err


def test_cat_to_file(notes, run, tmp_path):
    target = tmp_path / "out.bin"
    code, out, _ = run("cat", "notes.txt", "--passphrase", "abc123", "--out", str(target))
    assert code == 0
    assert target.read_bytes() == b"hello"
    assert "hello" not in out


def test_ls(notes, run):
    code, out, _ = run("ls")
    assert code == 0
    lines = out.splitlines()
    assert lines[0].split() == ["Path", "Hint"]
    assert lines[1].startswith("notes.txt")
    assert lines[1].rstrip().endswith("my favorite")


def test_ls_empty(run):
    code, out, _ = run("ls")
    assert code == 0
    assert out.strip() == "(empty)"


def test_store_document_shape(notes, state_file):
    doc = json.loads(state_file.read_text())
    assert set(doc["notes.txt"]) == {"data", "hint", "passHash", "version"}
    assert doc["notes.txt"]["hint"] == "my favorite"


def test_mv_and_rm(notes, run):
    assert run("mv", "notes.txt", "moved", "--passphrase", "abc123")[0] == 0
    assert run("cat", "notes.txt", "--passphrase", "abc123")[0] == 3
    assert run("cat", "moved", "--passphrase", "abc123")[1] == "hello\n"
    assert run("rm", "moved", "--passphrase", "abc123")[0] == 0
    code, _, err = run("cat", "moved", "--passphrase", "abc123")
    assert code == 3
    assert "Could not find file: moved" in err


def test_mv_missing_leaves_document_alone(notes, run, state_file):
    before = state_file.read_text()
    code, _, _ = run("mv", "a", "b", "--passphrase", "abc123")
    assert code == 3
    assert state_file.read_text() == before


def test_mv_no_clobber(notes, run, tmp_path):
    other = tmp_path / "other.txt"
    other.write_bytes(b"x")
    run("enc", "-i", str(other), "-o", "other", "--passphrase", "pw", "--hint", "", *FAST)
    code, _, _ = run("mv", "notes.txt", "other", "--passphrase", "abc123", "--no-clobber")
    assert code == 2


def test_rm_wrong_password_keeps_record(notes, run):
    assert run("rm", "notes.txt", "--passphrase", "nope")[0] == 4
    assert run("cat", "notes.txt", "--passphrase", "abc123")[0] == 0


def test_enc_missing_source(run, tmp_path, state_file):
    code, _, err = run("enc", "-i", str(tmp_path / "nope"), "-o", "x", "--passphrase", "pw", *FAST)
    assert code == 2
    assert "Not a file" in err
    assert not state_file.exists()


def test_corrupt_store(run, state_file):
    state_file.write_text("[1, 2")
    code, _, err = run("ls")
    assert code == 5
    assert err.startswith("[!]")


def test_bad_arguments_exit_nonzero(state_file):
    with pytest.raises(SystemExit) as exc:
        crypt_vault.main(["mv", "--state", str(state_file), "only-one"])
    assert exc.value.code != 0


def test_interactive_prompts(tmp_path, run, monkeypatch):
    src = tmp_path / "a.txt"
    src.write_bytes(b"typed")
    prompts = []

    def fake_getpass(text):
        prompts.append(text)
        return "" if len(prompts) == 1 else "secret"

    monkeypatch.setattr(ui.prompt.getpass, "getpass", fake_getpass)
    monkeypatch.setattr("builtins.input", lambda _text: "  remember me ")
    assert run("enc", "-i", str(src), "-o", "a", *FAST)[0] == 0
    # empty answers are asked again
    assert prompts == ["Password: ", "Password: "]

    prompts.clear()
    code, out, _ = run("cat", "a")
    assert code == 0
    assert out == "typed\n"
    assert prompts[-1] == "Password (remember me): "


def test_prompt_interrupted(notes, run, monkeypatch):
    def interrupted(_text):
        raise KeyboardInterrupt

    monkeypatch.setattr(ui.prompt.getpass, "getpass", interrupted)
    assert run("cat", "notes.txt")[0] == 130


def test_rekey_upgrades_legacy_store(run, state_file, legacy_encrypt):
    from crypto.hash import hash_password
    state_file.write_text(json.dumps({
        "old": {"data": legacy_encrypt(b"legacy", "abc123"), "hint": "h", "passHash": hash_password("abc123")},
    }))
    assert run("cat", "old", "--passphrase", "abc123")[1] == "legacy\n"
    assert run("rekey", "old", "--passphrase", "abc123", *FAST)[0] == 0
    assert json.loads(state_file.read_text())["old"]["version"] == 2
    assert run("cat", "old", "--passphrase", "abc123")[1] == "legacy\n"


def test_rekey_new_passphrase(notes, run):
    assert run("rekey", "notes.txt", "--passphrase", "abc123", "--new-passphrase", "n3w", *FAST)[0] == 0
    assert run("cat", "notes.txt", "--passphrase", "abc123")[0] == 4
    assert run("cat", "notes.txt", "--passphrase", "n3w")[1] == "hello\n"


def test_rekey_empty_new_passphrase(notes, run):
    assert run("rekey", "notes.txt", "--passphrase", "abc123", "--new-passphrase", "", *FAST)[0] == 2
    assert run("cat", "notes.txt", "--passphrase", "abc123")[1] == "hello\n"


def test_enc_rejects_out_of_range_costs(notes, run):
    code, _, err = run("enc", "-i", str(notes), "-o", "x", "--passphrase", "pw",
                       "-t", "1", "-m", str(2**33), "-p", "1")
    assert code == 2
    assert "Argon2 memory" in err
