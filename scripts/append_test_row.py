# scripts/append_test_row.py
from registration.core.config import settings
from registration.services.relay import SubmissionRelay
from registration.services.validation import parse_application

SAMPLE_APPLICATION = {
    "name": "Test User",
    "enrollment": "E23BU1234",
    "course": "B.Tech CSE",
    "phone": "9876543210",
    "residency": "Hosteller",
    "teams": ["Tech", "Design", "PR"],
    "why": "I want to join CSI because I love technology and want to learn more.",
    "portfolio": "https://github.com/testuser",
    "experience": "Worked on several projects",
}

def main():
    print("STORAGE_URL =", settings.STORAGE_URL)
    application = parse_application(SAMPLE_APPLICATION)
    with SubmissionRelay(settings.STORAGE_URL) as relay:
        outcome = relay.send(application)
    if outcome.ok:
        print("OK: row appended for", application.enrollment, "teams =", application.team_choices)
    else:
        print("FAILED:", outcome.message)
        raise SystemExit(1)

if __name__ == "__main__":
    main()
