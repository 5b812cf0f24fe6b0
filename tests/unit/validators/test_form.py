"""
Tests for contact form validation.

Tests text sanitisation, e-mail checks, honeypot and dwell-time checks,
spam scoring, and the combined ContactFormValidator verdict.
"""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from folio.configs import FormConfig, RateLimitConfig
from folio.security.rate_limit import RateLimiter
from folio.validators.form import (
    HONEYPOT_MESSAGE,
    ContactFormValidator,
    EmailValidator,
    HoneypotValidator,
    TextSanitizer,
    assess_spam,
)

from conftest import NOW, make_submission

SPAM_MESSAGE = "WINNER! Click here to claim $100 at https://spam.example now"


@pytest.fixture
def validator():
    return ContactFormValidator(clock=lambda: NOW)


class TestTextSanitizer:
    """Tests for TextSanitizer."""

    def test_escape_html(self):
        assert TextSanitizer.escape_html("<b>&\"'/") == "&lt;b&gt;&amp;&quot;&#x27;&#x2F;"

    def test_removes_script_elements(self):
        cleaned = TextSanitizer.remove_xss_patterns("Hi <script>alert(1)</script>there")
        assert cleaned == "Hi there"

    def test_removal_cannot_splice_new_tags(self):
        """Nested fragments that reassemble into a tag are removed too."""
        cleaned = TextSanitizer.remove_xss_patterns("<scr<script>x</script>ipt>alert(1)</script>")
        assert "<script" not in cleaned.lower()

    def test_removes_handlers_and_schemes(self):
        cleaned = TextSanitizer.remove_xss_patterns('<img src=x onerror=alert(1)> javascript:go()')
        assert "onerror" not in cleaned
        assert "javascript:" not in cleaned

    def test_sanitize_text_escapes(self):
        assert TextSanitizer.sanitize_text("  <b>hi</b>  ") == "&lt;b&gt;hi&lt;&#x2F;b&gt;"

    def test_sanitize_text_markdown(self):
        """Markdown mode strips XSS but leaves characters unescaped."""
        assert TextSanitizer.sanitize_text(
            "**bold** <script>x</script>", allow_markdown=True
        ) == "**bold** "

    def test_sanitize_text_truncates(self):
        assert TextSanitizer.sanitize_text("abcdef", max_length=3) == "abc"

    def test_validate_text_length(self):
        assert TextSanitizer.validate_text_length("  hi ", 3, 10, "Name") == (
            "Name must be at least 3 characters long"
        )
        assert TextSanitizer.validate_text_length("x" * 11, 3, 10, "Name") == (
            "Name must not exceed 10 characters"
        )
        assert TextSanitizer.validate_text_length("Jane", 3, 10) is None


class TestEmailValidator:
    """Tests for EmailValidator."""

    @pytest.mark.parametrize("email", ["a..b@x.com", ".a@x.com", "a@x.com.", "no-at-sign"])
    def test_invalid_format(self, email):
        assert EmailValidator.validate_format(email) == "Invalid email format"

    def test_valid(self):
        check = EmailValidator().validate("jane@example.org")
        assert check.valid
        assert check.errors == []
        assert check.warnings == []

    def test_disposable_domain(self):
        """Disposable domains warn, case-insensitively."""
        check = EmailValidator().validate("x@Mailinator.com")
        assert check.valid
        assert check.warnings == ["Disposable email domain detected: mailinator.com"]

    @pytest.mark.parametrize("email", ["test@test.com", "noreply@shop.com", "donotreply@x.org"])
    def test_suspicious(self, email):
        assert EmailValidator().validate(email).warnings == ["Suspicious email pattern detected"]

    def test_invalid_short_circuits(self):
        check = EmailValidator().validate("broken")
        assert not check.valid
        assert check.errors == ["Invalid email format"]


class TestHoneypotValidator:
    """Tests for HoneypotValidator."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_honeypot(self, value):
        assert HoneypotValidator.check_honeypot(value) is None

    def test_filled_honeypot(self):
        assert HoneypotValidator.check_honeypot("http://spam") == "Honeypot field filled"

    def test_too_fast(self):
        started = (NOW - timedelta(seconds=1)).strftime("%Y-%m-%dT%H:%M:%SZ")
        assert HoneypotValidator().check_timestamp(started, NOW) == "Form submitted too quickly"

    def test_expired(self):
        started = (NOW - timedelta(minutes=31)).strftime("%Y-%m-%dT%H:%M:%SZ")
        assert HoneypotValidator().check_timestamp(started, NOW) == "Form submission expired"

    def test_plausible(self):
        assert HoneypotValidator().check_timestamp("2024-06-01T11:58:00Z", NOW) is None

    @pytest.mark.parametrize("value", [None, "yesterday", 1717243080])
    def test_unusable_timestamps_ignored(self, value):
        assert HoneypotValidator().check_timestamp(value, NOW) is None


class TestAssessSpam:
    """Tests for assess_spam scoring."""

    def test_clean_message(self):
        spam = assess_spam("Jane Visitor", "jane@example.org", make_submission()["message"])
        assert spam.score == 0
        assert not spam.is_spam
        assert spam.indicators == []

    def test_vocabulary_scores_once(self):
        spam = assess_spam("Jane Visitor", "jane@example.org", "Visit the casino now, you are a winner")
        assert spam.score == 2
        assert spam.indicators == ["Spam pattern detected: spam vocabulary (+2)"]
        assert not spam.is_spam

    def test_money_scores_per_match(self):
        spam = assess_spam("Jane Visitor", "jane@example.org", "Pay $10 or $20 today please friend")
        assert spam.indicators == ["Spam pattern detected: money amounts (+2)"]

    def test_shouting(self):
        spam = assess_spam("Jane Visitor", "jane@example.org", "HELLO THERE my friend")
        assert spam.score == 2

    def test_one_word_name_long_message(self):
        spam = assess_spam("Bob", "bob@example.org", " ".join(["hello"] * 51))
        assert spam.indicators == ["Suspicious name/message length ratio"]
        assert spam.score == 2

    def test_special_characters(self):
        spam = assess_spam("Jane Visitor", "jane@example.org", "!!!???###")
        assert "Excessive special characters" in spam.indicators

    def test_disposable_domain(self):
        spam = assess_spam("Jane Visitor", "jane@mailinator.com", "A perfectly normal message")
        assert spam.indicators == ["Disposable email domain"]
        assert spam.score == 2

    def test_threshold(self):
        """Scores at or above the threshold are spam."""
        spam = assess_spam("Jane Visitor", "jane@example.org", SPAM_MESSAGE)
        assert spam.score >= 3
        assert spam.is_spam

        lenient = assess_spam(
            "Jane Visitor",
            "jane@example.org",
            "Visit the casino now, you are a winner",
            config=FormConfig(spam_threshold=2),
        )
        assert lenient.is_spam

    def test_to_dict(self):
        spam = assess_spam("Jane Visitor", "jane@mailinator.com", "A perfectly normal message")
        assert spam.to_dict() == {"isSpam": False, "score": 2, "indicators": ["Disposable email domain"]}


class TestContactFormValidator:
    """Tests for ContactFormValidator.validate_submission."""

    def test_valid_submission(self, validator):
        result = validator.validate_submission(make_submission())
        assert result.valid
        assert result.errors == []
        assert result.warnings == []
        assert result.data.name == "Jane Visitor"
        assert result.spam.score == 0

    def test_honeypot_invalidates(self, validator):
        """A filled honeypot is a bot, whatever else the form says."""
        result = validator.validate_submission(make_submission(honeypot="http://spam"))
        assert not result.valid
        assert result.errors == [HONEYPOT_MESSAGE]

    def test_timing_is_a_warning(self, validator):
        result = validator.validate_submission(make_submission(timestamp="2024-06-01T11:59:59Z"))
        assert result.valid
        assert result.warnings == ["Form submitted too quickly"]

    def test_schema_errors_stop_later_stages(self, validator):
        result = validator.validate_submission(make_submission(email="nope"))
        assert not result.valid
        assert result.errors == ["email: Invalid email format"]
        assert result.data is None

    def test_honeypot_checked_even_on_schema_failure(self, validator):
        result = validator.validate_submission(make_submission(email="nope", honeypot="x"))
        assert result.errors == ["email: Invalid email format", HONEYPOT_MESSAGE]

    def test_non_mapping(self, validator):
        result = validator.validate_submission("name=Jane")
        assert result.errors == ["root: Expected object, received string"]

    def test_name_escaped_message_cleaned(self, validator):
        result = validator.validate_submission(
            make_submission(
                name="<b>Jane</b>",
                message="Hello there <script>alert(1)</script> **friend**",
            )
        )
        assert result.valid
        assert result.data.name == "&lt;b&gt;Jane&lt;&#x2F;b&gt;"
        assert "<script" not in result.data.message
        assert result.data.message.endswith("**friend**")

    def test_message_too_short_after_sanitising(self, validator):
        result = validator.validate_submission(
            make_submission(message="<script>alert('x')</script>ok")
        )
        assert not result.valid
        assert result.errors == ["Message must be at least 10 characters long"]

    def test_spam_flag_warns_only(self, validator):
        result = validator.validate_submission(make_submission(message=SPAM_MESSAGE))
        assert result.valid
        assert result.spam.is_spam
        assert f"Submission flagged as likely spam (score {result.spam.score})" in result.warnings

    def test_disposable_email_warning(self, validator):
        result = validator.validate_submission(make_submission(email="jane@mailinator.com"))
        assert result.valid
        assert "Disposable email domain detected: mailinator.com" in result.warnings
        assert result.spam.score == 2

    def test_to_dict(self, validator):
        payload = validator.validate_submission(make_submission()).to_dict()
        assert set(payload) == {"valid", "errors", "warnings", "spam"}
        assert payload["spam"]["isSpam"] is False

    def test_logging(self):
        logger = MagicMock()
        validator = ContactFormValidator(clock=lambda: NOW, logger=logger)
        validator.validate_submission(make_submission(honeypot="x"))
        logger.log_warning.assert_called_once_with("Contact form honeypot triggered")

    def test_validate_spam_indicators(self, validator):
        submission = validator.validate_submission(make_submission(message=SPAM_MESSAGE)).data
        assert validator.validate_spam_indicators(submission).is_spam


class TestContactRateLimit:
    """Tests for ContactFormValidator.check_rate_limit."""

    def test_three_attempts_per_sender(self):
        validator = ContactFormValidator(rate_limiter=RateLimiter(clock=lambda: 1000.0))
        decisions = [validator.check_rate_limit("jane@example.org") for _ in range(4)]
        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert decisions[0].remaining == 2

    def test_senders_counted_separately(self):
        validator = ContactFormValidator(rate_limiter=RateLimiter(clock=lambda: 1000.0))
        for _ in range(3):
            validator.check_rate_limit("jane@example.org")
        assert validator.check_rate_limit("bob@example.org").allowed

    def test_user_agent_fallback(self):
        limiter = RateLimiter(clock=lambda: 1000.0)
        validator = ContactFormValidator(rate_limiter=limiter)
        validator.check_rate_limit(None, "Mozilla/5.0")
        validator.check_rate_limit(None, None)
        assert limiter.attempt_count("Mozilla/5.0") == 1
        assert limiter.attempt_count("anonymous") == 1

    def test_configured_contact_allowance(self):
        validator = ContactFormValidator(
            rate_limiter=RateLimiter(clock=lambda: 1000.0),
            rate_limit_config=RateLimitConfig(contact_max_attempts=1),
        )
        first = validator.check_rate_limit("jane@example.org")
        second = validator.check_rate_limit("jane@example.org")
        assert (first.allowed, first.remaining) == (True, 0)
        assert not second.allowed
