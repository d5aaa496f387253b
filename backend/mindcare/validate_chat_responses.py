# mindcare/validate_chat_responses.py
import json
import sys
from pathlib import Path

REQUIRED_CATEGORIES = {"crisis", "greeting", "general"}


def validate_chat_responses_file():
    file_path = Path(__file__).parent / "data" / "chat_responses.json"

    print(f"🔍 Validating {file_path}...")

    # Check if file exists
    if not file_path.exists():
        print(f"❌ ERROR: {file_path} not found!")
        sys.exit(1)

    # Check if it's valid JSON
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Invalid JSON in {file_path}: {e}")
        sys.exit(1)

    # Basic schema check
    required_keys = {"id", "keywords", "greetings", "response", "options"}
    errors = []

    for i, rule in enumerate(data):
        missing = required_keys - rule.keys()
        if missing:
            errors.append(f"Rule {i}: missing keys {missing}")
            continue

        if not isinstance(rule["keywords"], list) or not isinstance(rule["greetings"], list):
            errors.append(f"Rule {i}: 'keywords' and 'greetings' must be lists")

        if not isinstance(rule["response"], str) or not rule["response"].strip():
            errors.append(f"Rule {i}: 'response' must be a non-empty string")

        if not rule["options"]:
            errors.append(f"Rule {i}: at least one follow-up option is required")

    missing_categories = REQUIRED_CATEGORIES - {rule.get("id") for rule in data}
    if missing_categories:
        errors.append(f"Missing required categories: {sorted(missing_categories)}")

    if errors:
        for err in errors:
            print(f"❌ {err}")
        sys.exit(1)

    print(f"✅ {len(data)} chat response rules validated successfully.")


if __name__ == "__main__":
    validate_chat_responses_file()
