import textwrap

from bizsite import contact_cli
from bizsite.submission import SubmissionError


class FakeSubmitter:
    instances = []

    def __init__(self, endpoint, timeout=10.0, outcome=True, error=None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.payloads = []
        self.outcome = outcome
        self.error = error
        FakeSubmitter.instances.append(self)

    def submit(self, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.outcome


def _install(monkeypatch, **kwargs):
    FakeSubmitter.instances = []
    monkeypatch.setattr(contact_cli, "configure_logging", lambda: None)
    monkeypatch.setattr(
        contact_cli,
        "HttpFormSubmitter",
        lambda endpoint, timeout=10.0: FakeSubmitter(endpoint, timeout, **kwargs),
    )
    monkeypatch.delenv("BIZSITE_FORM_ENDPOINT", raising=False)


VALID_ARGS = [
    "--name",
    "Jane Doe",
    "--email",
    "jane@example.com",
    "--message",
    "Please call me back about a quote.",
]


def test_contact_cli_submits_valid_form(monkeypatch, capsys):
    _install(monkeypatch)

    exit_code = contact_cli.main(
        VALID_ARGS
        + [
            "--service",
            "consulting",
            "--landing-url",
            "https://acme.example.com/contact/?utm_source=ads",
            "--endpoint",
            "https://formspree.io/f/cli",
        ]
    )

    assert exit_code == 0
    [submitter] = FakeSubmitter.instances
    assert submitter.endpoint == "https://formspree.io/f/cli"
    assert submitter.payloads[0]["service"] == "consulting"
    assert submitter.payloads[0]["utm_source"] == "ads"
    assert "Next: /success/" in capsys.readouterr().out


def test_contact_cli_reports_field_errors_without_sending(monkeypatch, capsys):
    _install(monkeypatch)

    exit_code = contact_cli.main(["--name", "J", "--email", "nope"])

    assert exit_code == 1
    assert FakeSubmitter.instances[0].payloads == []
    out = capsys.readouterr().out
    assert "There are 3 errors in the form" in out
    assert "name: Name must be at least 2 characters" in out
    assert "email: Please enter a valid email address" in out
    assert "message: Message is required" in out


def test_contact_cli_returns_error_when_relay_fails(monkeypatch, capsys):
    _install(monkeypatch, error=SubmissionError("timeout"))

    exit_code = contact_cli.main(VALID_ARGS)

    assert exit_code == 1
    assert "Something went wrong" in capsys.readouterr().out


def test_contact_cli_reads_form_settings_from_config(monkeypatch, tmp_path, capsys):
    _install(monkeypatch)
    config_file = tmp_path / "site.xml"
    config_file.write_text(
        textwrap.dedent("""
            <config>
                <content>blog.json</content>
                <form>
                    <endpoint>https://formspree.io/f/configured</endpoint>
                    <redirect-url>/thanks/</redirect-url>
                    <timeout>3</timeout>
                </form>
            </config>
        """),
        encoding="utf-8",
    )

    exit_code = contact_cli.main(VALID_ARGS + ["--config", str(config_file)])

    assert exit_code == 0
    [submitter] = FakeSubmitter.instances
    assert submitter.endpoint == "https://formspree.io/f/configured"
    assert submitter.timeout == 3.0
    assert "Next: /thanks/" in capsys.readouterr().out


def test_contact_cli_prefers_environment_endpoint(monkeypatch):
    _install(monkeypatch)
    monkeypatch.setenv("BIZSITE_FORM_ENDPOINT", "https://formspree.io/f/env")

    contact_cli.main(VALID_ARGS)

    assert FakeSubmitter.instances[0].endpoint == "https://formspree.io/f/env"
