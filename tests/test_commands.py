"""Tests for the command processor."""

from datetime import datetime, timezone

import pytest

from termfolio.engine.commands import (
    DEFAULT_RESUME_URL,
    VIRTUAL_FILES,
    CommandKind,
    StemSuggester,
    parse_kind,
    process,
)
from termfolio.engine.output import CLEAR, CommandOutput, Tone
from termfolio.models import PortfolioData


def run(command: str, data: PortfolioData, history: list[str] | None = None) -> CommandOutput:
    output = process(command, data, history or [command])
    assert isinstance(output, CommandOutput)
    return output


def test_loading_notice_when_data_missing():
    """Data commands answer with a loading notice before data arrives."""
    output = process("skills", None, ["skills"])

    assert isinstance(output, CommandOutput)
    assert output.plain_text() == "Loading portfolio data..."
    assert output.lines[0].tone is Tone.MUTED


def test_skills_lists_categories_in_order(portfolio: PortfolioData):
    """Test that skills keeps category order."""
    output = run("skills", portfolio)

    headings = [line.text for line in output.lines if line.tone is Tone.HEADING]
    assert headings == ["Languages", "Frameworks", "Cloud"]
    assert output.lines[1].tags == ("Python", "TypeScript", "Go")
    # No trailing separator
    assert output.lines[-1].tags == ("AWS", "Docker", "Terraform")


def test_process_is_idempotent(portfolio: PortfolioData):
    """Same input, same output."""
    assert run("projects", portfolio) == run("projects", portfolio)


def test_parse_kind():
    """Test command word parsing."""
    assert parse_kind("  Experience --short") is CommandKind.EXPERIENCE
    assert parse_kind("touch file") is CommandKind.READ_ONLY
    assert parse_kind("") is CommandKind.UNKNOWN
    assert parse_kind("foobar") is CommandKind.UNKNOWN


def test_help_lists_every_topic(portfolio: PortfolioData):
    """Test help output."""
    text = run("help", portfolio).plain_text()

    assert "experience --short:" in text
    assert "sudo hire-me:" in text
    assert text.endswith("Or just ask me anything!")


def test_experience_short_and_full(portfolio: PortfolioData):
    """Test experience summary and --full detail."""
    short = run("experience --short", portfolio).plain_text().splitlines()
    assert short == [
        "Acme Corp — Senior Engineer [2022 - Present]",
        "Initech — Engineer [2019 - 2022]",
    ]

    full = run("experience", portfolio).plain_text()
    assert "2022 - Present · Remote" in full
    assert "▹ Led the billing rewrite" in full


def test_projects_list_only(portfolio: PortfolioData):
    """Test projects --ls."""
    output = run("projects --ls", portfolio)

    assert [line.text for line in output.lines] == ["Tracecat", "Pinboard Sync"]
    assert all(line.tone is Tone.PROJECT for line in output.lines)


def test_contact_rows(portfolio: PortfolioData):
    """Test contact rows."""
    text = run("contact", portfolio).plain_text()

    assert "📧 Email: sam@example.com" in text
    assert "🐙 GitHub: github.com/samrivera" in text


def test_echo_keeps_original_casing(portfolio: PortfolioData):
    """echo keeps the typed casing."""
    assert run("echo Hello World", portfolio).plain_text() == "Hello World"
    assert run("  ECHO  spaced", portfolio).plain_text() == " spaced"
    assert run("echo", portfolio).plain_text() == ""


def test_pwd_and_uname_use_the_owner(portfolio: PortfolioData):
    """Test that pwd and uname use the owner's handle."""
    assert run("pwd", portfolio).plain_text() == "/home/sam/portfolio"
    assert "sam-portfolio" in run("uname -a", portfolio).plain_text()


def test_date_uses_injected_clock(portfolio: PortfolioData):
    """Test date with an injected clock."""
    now = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)
    output = process("date", portfolio, ["date"], now=now)

    text = output.plain_text()
    assert text.startswith(now.astimezone().strftime("%a %b %d %Y"))
    assert "GMT" in text


def test_history_numbers_entries(portfolio: PortfolioData):
    """Test history numbering."""
    output = run("history", portfolio, ["skills", "help", "history"])

    assert [line.label for line in output.lines] == ["   1", "   2", "   3"]
    assert output.lines[2].text == "history"


def test_clear_returns_signal(portfolio: PortfolioData):
    """clear returns the clear signal, not output."""
    assert process("clear", portfolio, ["clear"]) is CLEAR


def test_ls_lists_files_and_projects_dir(portfolio: PortfolioData):
    """Test ls output."""
    text = run("ls", portfolio).plain_text()

    for name in VIRTUAL_FILES:
        assert name in text
    assert "projects/" in text


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("about.txt", "Backend engineer"),
        ("skills.json", "Languages"),
        ("experience.md", "Acme Corp"),
        ("contact.txt", "sam@example.com"),
        ("certifications.txt", "✓ CKA"),
    ],
)
def test_cat_reads_virtual_files(portfolio: PortfolioData, filename: str, expected: str):
    """Test cat on each virtual file."""
    assert expected in run(f"cat {filename}", portfolio).plain_text()


def test_cat_suggests_near_miss(portfolio: PortfolioData):
    """A near-miss file name gets a suggestion."""
    output = run("cat about.tx", portfolio)

    assert output.lines[0].text == "cat: about.tx: No such file or directory"
    assert output.lines[1].text == "💡 Did you mean: cat about.txt?"


def test_cat_unknown_file_lists_available(portfolio: PortfolioData):
    """Test cat on an unknown file."""
    output = run("cat secrets.env", portfolio)

    assert output.lines[0].tone is Tone.ERROR
    assert "📁 Available files: about.txt, skills.json" in output.lines[1].text


def test_cat_edge_cases(portfolio: PortfolioData):
    """Test cat without an argument and on a directory."""
    assert run("cat", portfolio).plain_text() == "cat: missing file operand"
    assert "Is a directory" in run("cat projects/", portfolio).plain_text()


def test_cat_uses_custom_suggester(portfolio: PortfolioData):
    """Test that a custom suggester is used."""
    class Always:
        def suggest(self, name, known):
            return known[-1]

    output = process("cat nope", portfolio, ["cat nope"], suggester=Always())
    assert output.lines[1].text == "💡 Did you mean: cat certifications.txt?"


def test_stem_suggester():
    """Test stem matching."""
    suggester = StemSuggester()

    assert suggester.suggest("skills.yaml", VIRTUAL_FILES) == "skills.json"
    assert suggester.suggest("resume.pdf", VIRTUAL_FILES) is None


def test_cd_variants(portfolio: PortfolioData):
    """Test cd targets."""
    assert run("cd", portfolio).plain_text() == "/home/sam/portfolio"

    to_file = run("cd skills.json", portfolio)
    assert to_file.lines[0].text == "bash: cd: skills.json: Not a directory"
    assert to_file.lines[1].text == "💡 Try: cat skills.json to read it"

    assert "Use projects" in run("cd projects", portfolio).plain_text()
    assert "No such directory" in run("cd /etc", portfolio).plain_text()


def test_sudo_hire_me_is_boxed(portfolio: PortfolioData):
    """Test the boxed sudo hire-me output."""
    output = run("sudo hire-me", portfolio)

    assert output.boxed
    assert "→ Candidate: Sam Rivera" in output.plain_text()


def test_sudo_other(portfolio: PortfolioData):
    """Other sudo commands are denied."""
    assert run("sudo rm -rf", portfolio).plain_text() == "sudo: rm -rf: command not found"


def test_curl_resume_requests_open(portfolio: PortfolioData):
    """Test that curl resume.pdf asks to open the resume."""
    output = run("curl resume.pdf", portfolio)

    assert output.open_url == DEFAULT_RESUME_URL
    assert DEFAULT_RESUME_URL in output.plain_text()


def test_curl_resume_prefers_portfolio_url(portfolio_json: dict):
    """The portfolio's resume URL wins over the default."""
    portfolio_json["personal"]["resumeUrl"] = "https://example.com/cv.pdf"
    data = PortfolioData.model_validate(portfolio_json)

    assert run("curl resume.pdf", data).open_url == "https://example.com/cv.pdf"


def test_curl_other_host(portfolio: PortfolioData):
    """Test curl against another host."""
    output = run("curl example.com", portfolio)

    assert output.plain_text() == "curl: (6) Could not resolve host: example.com"
    assert output.open_url is None


@pytest.mark.parametrize(
    ("command", "expected"),
    [
        ("rm -rf /", "bash: rm: permission denied (read-only filesystem)"),
        ("vim notes", "vim: this portfolio is already perfect"),
        ("grep python", "grep: try asking the AI instead!"),
        ("man ls", "No manual entry for ls. Try: help"),
        ("man", "No manual entry for man. Try: help"),
        ("git status", "github.com/samrivera"),
        ("ssh prod", "bash: ssh: network commands are not available"),
    ],
)
def test_playful_commands(portfolio: PortfolioData, command: str, expected: str):
    """Test the flavor responses."""
    assert expected in run(command, portfolio).plain_text()


def test_unknown_command(portfolio: PortfolioData):
    """Test the unknown command fallback."""
    output = run("foobar", portfolio)

    assert output.lines[0].text == "bash: foobar: command not found"
    assert output.lines[1].tone is Tone.HINT


def test_neofetch_derives_from_data(portfolio: PortfolioData):
    """Test that neofetch is built from portfolio data."""
    text = run("neofetch", portfolio).plain_text()

    assert "Host: portfolio.sam.dev" in text
    assert "Role: Senior Engineer" in text
    assert "Location: Austin, TX" in text
