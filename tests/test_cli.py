import json

import pytest
from typer.testing import CliRunner

import cli
from vocab.config import settings
from vocab.crud import get_review_logs

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_db(session_factory, tmp_path, monkeypatch):
    """Point the CLI at the test database and a throwaway session file"""
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    monkeypatch.setattr(settings, "session_state_path", str(tmp_path / "session.json"))


def test_create_profile():
    result = runner.invoke(cli.app, ["create-profile", "--name", "Alex", "--new-limit", "5"])
    assert result.exit_code == 0
    assert "User ID: 1" in result.output
    assert "5 new" in result.output


def test_unknown_user_is_reported():
    result = runner.invoke(cli.app, ["due", "42"])
    assert result.exit_code == 0
    assert "not found" in result.output


def test_add_word_shows_up_in_due(user):
    result = runner.invoke(cli.app, [
        "add-word", "--user-id", str(user.id), "--word", "serendipity",
        "--meaning", "happy accident", "--pos", "n."
    ])
    assert result.exit_code == 0
    assert "Added 'serendipity'" in result.output

    result = runner.invoke(cli.app, ["due", str(user.id)])
    assert "serendipity" in result.output
    assert "1 new" in result.output


def test_review_session_rates_and_saves(db, user, make_word, tmp_path):
    make_word("apple", meaning="a fruit")

    # flip, rate Good, skip reinforcement, skip quiz
    result = runner.invoke(cli.app, ["review", str(user.id)], input="\n3\nn\nn\n")

    assert result.exit_code == 0, result.output
    assert "a fruit" in result.output
    assert "learning complete" in result.output
    assert len(get_review_logs(db, user.id)) == 1

    saved = json.loads((tmp_path / "session.json").read_text())
    assert saved[str(user.id)]["new_cards_shown"] is True


def test_review_with_nothing_to_study(user):
    result = runner.invoke(cli.app, ["review", str(user.id)])
    assert result.exit_code == 0
    assert "No words yet" in result.output


def test_quiz_without_studied_words(user, make_word):
    make_word("apple")
    result = runner.invoke(cli.app, ["quiz", str(user.id)])
    assert "Not enough studied words" in result.output


def test_enable_list_creates_cards(user, tmp_path):
    word_file = tmp_path / "list.json"
    word_file.write_text(json.dumps([
        {"word": "one", "definitions": [{"pos": "num.", "meaning": "1"}]},
        {"word": "two", "definitions": [{"meaning": "2"}]},
        {"word": "broken"}
    ]))
    result = runner.invoke(cli.app, [
        "import-list", "--file-path", str(word_file), "--name", "Numbers", "--list-id", "numbers"
    ])
    assert "Skipping broken" in result.output
    assert "Added 2 words" in result.output

    result = runner.invoke(cli.app, ["enable-list", str(user.id), "numbers"])
    assert "2 new cards" in result.output


def test_export_and_stats(user, make_word, tmp_path):
    make_word("apple")
    output = tmp_path / "backup.json"
    result = runner.invoke(cli.app, ["export", str(user.id), "--output", str(output)])
    assert result.exit_code == 0
    assert json.loads(output.read_text())["words"][0]["word"] == "apple"

    result = runner.invoke(cli.app, ["stats", str(user.id)])
    assert result.exit_code == 0
    assert "Words tracked: 1" in result.output
