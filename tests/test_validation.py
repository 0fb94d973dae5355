import pytest

from registration.schemas.application import MESSAGES, build_phone_pattern, requires_portfolio
from registration.services.validation import ApplicationInvalid, parse_application, validate_application


def test_sample_application_is_valid(sample):
    assert validate_application(sample) == {}


def test_empty_record_reports_every_required_field_at_once():
    errors = validate_application({})
    assert set(errors) == {"name", "enrollment", "course", "phone", "residency", "teams", "why"}
    assert errors["name"] == MESSAGES["name"]
    assert errors["teams"] == MESSAGES["teams_empty"]


@pytest.mark.parametrize("teams", [["Tech"], ["Multimedia"], ["Design"], ["Tech", "Design"], ["Research", "Design"]])
@pytest.mark.parametrize("portfolio", ["", "   ", "github.com/x", "not a url"])
def test_portfolio_required_for_portfolio_teams(sample, teams, portfolio):
    sample.update(teams=teams, portfolio=portfolio)
    errors = validate_application(sample)
    assert errors == {"portfolio": MESSAGES["portfolio"]}


@pytest.mark.parametrize("teams", [["Research"], ["Management"], ["PR"], ["Sponsorship"]])
def test_empty_portfolio_passes_without_portfolio_team(sample, teams):
    sample.update(teams=teams, portfolio="")
    assert validate_application(sample) == {}


@pytest.mark.parametrize("portfolio", ["ftp://files.example.com/me", "mailto:me@example.com", "file:///home/me"])
def test_portfolio_url_must_be_http_or_https(sample, portfolio):
    sample.update(teams=["Design"], portfolio=portfolio)
    assert validate_application(sample) == {"portfolio": MESSAGES["portfolio"]}


@pytest.mark.parametrize("portfolio", ["http://example.com/me", "https://behance.net/me", "  https://github.com/x  "])
def test_http_portfolio_urls_pass(sample, portfolio):
    sample.update(teams=["Design"], portfolio=portfolio)
    assert validate_application(sample) == {}


def test_portfolio_not_checked_when_not_required(sample):
    sample.update(teams=["PR"], portfolio="whatever")
    assert validate_application(sample) == {}


@pytest.mark.parametrize(
    "teams, ok",
    [
        ([], False),
        (["Research"], True),
        (["Research", "PR"], True),
        (["Research", "PR", "Management"], True),
        (["Research", "PR", "Management", "Sponsorship"], False),
    ],
)
def test_team_cardinality(sample, teams, ok):
    sample.update(teams=teams, portfolio="")
    errors = validate_application(sample)
    assert ("teams" not in errors) is ok


def test_duplicate_teams_count_once(sample):
    sample.update(teams=["PR", "PR", "Research", "Research"], portfolio="")
    application = parse_application(sample)
    assert [t.value for t in application.teams] == ["PR", "Research"]


def test_unknown_team_is_rejected(sample):
    sample.update(teams=["Chess"])
    assert validate_application(sample)["teams"] == "Unknown team: Chess."


@pytest.mark.parametrize("phone", ["9876543210", "+919876543210", "919876543210", "+91 9876543210", "09876543210", "6123456789"])
def test_valid_phones(sample, phone):
    sample["phone"] = phone
    assert "phone" not in validate_application(sample)


@pytest.mark.parametrize("phone", ["12345", "5555555555", "98765432101", "98765 43210", ""])
def test_invalid_phones(sample, phone):
    sample["phone"] = phone
    assert validate_application(sample)["phone"] == MESSAGES["phone"]


def test_phone_leading_digit_range_is_configurable(sample):
    sample["phone"] = "6123456789"
    older_rule = build_phone_pattern("7-9")
    assert "phone" in validate_application(sample, phone_pattern=older_rule)


def test_build_phone_pattern_rejects_garbage():
    with pytest.raises(ValueError):
        build_phone_pattern("a-z]")


@pytest.mark.parametrize("residency", ["", None, "Commuter", "hosteller"])
def test_residency_must_be_one_of_two(sample, residency):
    sample["residency"] = residency
    assert validate_application(sample)["residency"] == MESSAGES["residency"]


def test_missing_residency_fails(sample):
    del sample["residency"]
    assert "residency" in validate_application(sample)


@pytest.mark.parametrize(
    "why, key",
    [("x" * 19, "why_short"), ("x" * 501, "why_long")],
)
def test_why_length_bounds(sample, why, key):
    sample["why"] = why
    assert validate_application(sample)["why"] == MESSAGES[key]


@pytest.mark.parametrize("why", ["x" * 20, "x" * 500])
def test_why_length_edges_pass(sample, why):
    sample["why"] = why
    assert validate_application(sample) == {}


def test_short_text_fields(sample):
    sample.update(name="G", enrollment="E23", course="B")
    errors = validate_application(sample)
    assert errors == {
        "name": MESSAGES["name"],
        "enrollment": MESSAGES["enrollment"],
        "course": MESSAGES["course"],
    }


def test_numeric_values_are_checked_as_text(sample):
    sample.update(phone=9876543210, name=7)
    assert validate_application(sample) == {"name": MESSAGES["name"]}

    sample["name"] = 12
    assert validate_application(sample) == {}

    sample.update(phone=12345, name="Goutam", course=7)
    assert validate_application(sample) == {
        "course": MESSAGES["course"],
        "phone": MESSAGES["phone"],
    }


def test_non_text_values_get_rule_messages(sample):
    sample.update(name=["Goutam"], phone={"n": 1}, why=True)
    errors = validate_application(sample)
    assert errors == {
        "name": MESSAGES["name"],
        "phone": MESSAGES["phone"],
        "why": MESSAGES["why_short"],
    }


def test_experience_is_unconstrained(sample):
    sample["experience"] = None
    assert validate_application(sample) == {}


def test_parse_application_raises_with_all_errors(sample):
    sample.update(name="", teams=[])
    with pytest.raises(ApplicationInvalid) as ei:
        parse_application(sample)
    assert list(ei.value.errors) == ["name", "teams"]


def test_requires_portfolio():
    assert requires_portfolio(["Research", "Design"])
    assert not requires_portfolio(["Research", "PR"])
    assert not requires_portfolio(None)
    assert not requires_portfolio([{"bad": 1}])
