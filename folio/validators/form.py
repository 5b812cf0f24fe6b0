#!/usr/bin/env python3
"""
form.py
-------
Contact form validation: schema, bot checks, sanitisation, spam scoring.

A submission goes through these stages and every stage's findings are
merged into one FormValidationResult:

    1. Schema       structural rules of the contact submission
    2. Honeypot     a filled hidden field is an error (bot)
    3. Timestamp    too fast / too stale submissions are warnings
    4. E-mail       format error; disposable / suspicious warnings
    5. Sanitise     strip XSS patterns, escape HTML, re-check lengths
    6. Spam score   heuristics; at or above the threshold flags spam

Honeypot and timestamp checks read the raw mapping, so they run even when
the schema stage fails. The e-mail, sanitisation and spam stages need a
structurally valid submission and are skipped otherwise.

Spam never invalidates a submission by itself: the caller decides what to
do with `result.spam.is_spam`.

Usage:
    from folio.validators.form import ContactFormValidator

    result = ContactFormValidator().validate_submission(payload)
    if not result.valid:
        return 400, {"errors": result.errors}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern

# --- Local imports ---
from folio.configs import FORM, RATE_LIMIT, FormConfig, RateLimitConfig
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.models.content import ContactSubmission
from folio.security.rate_limit import RateLimitDecision, RateLimiter
from folio.utils.dates import parse_date
from folio.validators.schema import EMAIL_PATTERN, validate_contact_submission

HONEYPOT_MESSAGE = "Bot detection triggered: Honeypot field filled"


# ----- Text sanitisation -----


class TextSanitizer:
    """
    Removes XSS vectors from user text and escapes HTML.

    Escaping is not idempotent: `&amp;` escaped again becomes `&amp;amp;`.
    Sanitise raw input exactly once.
    """

    XSS_PATTERNS: List[Pattern] = [
        re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
        re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
        re.compile(r"javascript:", re.IGNORECASE),
        re.compile(r"on\w+\s*=", re.IGNORECASE),
        re.compile(r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>", re.IGNORECASE),
        re.compile(r"<embed\b[^<]*(?:(?!</embed>)<[^<]*)*</embed>", re.IGNORECASE),
        re.compile(r"<link\b[^<]*>", re.IGNORECASE),
        re.compile(r"<meta\b[^<]*>", re.IGNORECASE),
        # Unterminated or self-closing script openers left over by the above
        re.compile(r"<script\b[^>]*>?", re.IGNORECASE),
    ]

    HTML_ENTITIES: Dict[str, str] = {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "/": "&#x2F;",
    }

    @classmethod
    def escape_html(cls, text: str) -> str:
        """Replace `& < > " ' /` with HTML entities."""
        return re.sub(r"[&<>\"'/]", lambda m: cls.HTML_ENTITIES[m.group(0)], text)

    @classmethod
    def remove_xss_patterns(cls, text: str) -> str:
        """
        Strip every XSS pattern, repeating until nothing changes so that
        removals cannot splice a new tag together (`<scr<script>ipt>`).
        """
        previous = None
        while previous != text:
            previous = text
            for pattern in cls.XSS_PATTERNS:
                text = pattern.sub("", text)
        return text

    @classmethod
    def sanitize_text(
        cls,
        text: str,
        allow_markdown: bool = False,
        max_length: Optional[int] = None,
        remove_xss: bool = True,
    ) -> str:
        """
        Trim, strip XSS patterns, escape HTML (unless markdown is allowed),
        and truncate to `max_length`.
        """
        sanitized = text.strip()
        if remove_xss:
            sanitized = cls.remove_xss_patterns(sanitized)
        if not allow_markdown:
            sanitized = cls.escape_html(sanitized)
        if max_length is not None and len(sanitized) > max_length:
            sanitized = sanitized[:max_length]
        return sanitized

    @staticmethod
    def validate_text_length(
        text: str, min_length: int, max_length: int, label: str = "Text"
    ) -> Optional[str]:
        """Return an error message if the trimmed length is out of bounds."""
        length = len(text.strip())
        if length < min_length:
            return f"{label} must be at least {min_length} characters long"
        if length > max_length:
            return f"{label} must not exceed {max_length} characters"
        return None


# ----- E-mail -----


@dataclass
class EmailCheck:
    """Result of the e-mail stage."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class EmailValidator:
    """Format, disposable-domain and suspicious-address checks."""

    SUSPICIOUS_PATTERNS: List[Pattern] = [
        re.compile(r"test@test\.com", re.IGNORECASE),
        re.compile(r"admin@admin\.com", re.IGNORECASE),
        re.compile(r"noreply@", re.IGNORECASE),
        re.compile(r"no-reply@", re.IGNORECASE),
        re.compile(r"donotreply@", re.IGNORECASE),
    ]

    def __init__(self, config: FormConfig = FORM):
        self.disposable_domains = {d.lower() for d in config.disposable_domains}

    @staticmethod
    def validate_format(email: str) -> Optional[str]:
        if not EMAIL_PATTERN.match(email):
            return "Invalid email format"
        if ".." in email or email.startswith(".") or email.endswith("."):
            return "Invalid email format"
        return None

    @staticmethod
    def domain_of(email: str) -> Optional[str]:
        _, _, domain = email.partition("@")
        return domain.lower() or None

    def is_disposable(self, email: str) -> bool:
        return self.domain_of(email) in self.disposable_domains

    def is_suspicious(self, email: str) -> bool:
        return any(pattern.search(email) for pattern in self.SUSPICIOUS_PATTERNS)

    def validate(self, email: str) -> EmailCheck:
        error = self.validate_format(email)
        if error:
            return EmailCheck(False, [error])

        check = EmailCheck(True)
        if self.is_disposable(email):
            check.warnings.append(
                f"Disposable email domain detected: {self.domain_of(email)}"
            )
        if self.is_suspicious(email):
            check.warnings.append("Suspicious email pattern detected")
        return check


# ----- Bot checks -----


class HoneypotValidator:
    """Honeypot and dwell-time checks against automated submissions."""

    def __init__(self, config: FormConfig = FORM):
        self.config = config

    @staticmethod
    def check_honeypot(value: Any) -> Optional[str]:
        """Return a reason when the hidden field was filled."""
        if value is None or value == "":
            return None
        return "Honeypot field filled"

    def check_timestamp(self, timestamp: Any, now: datetime) -> Optional[str]:
        """
        Return a reason when the form was filled implausibly fast or slow.

        Missing or unparsable timestamps are left to the schema stage.
        """
        started = parse_date(timestamp) if isinstance(timestamp, str) else None
        if started is None:
            return None

        elapsed = (now - started).total_seconds()
        if elapsed < self.config.min_dwell_seconds:
            return "Form submitted too quickly"
        if elapsed > self.config.max_staleness_seconds:
            return "Form submission expired"
        return None


# ----- Spam scoring -----


@dataclass(frozen=True)
class SpamRule:
    """
    A weighted pattern over the message body.

    With `per_match`, every occurrence scores `weight`; otherwise the
    rule scores `weight` once when it matches at all.
    """

    name: str
    pattern: Pattern
    weight: int = 1
    per_match: bool = True


SPAM_RULES: List[SpamRule] = [
    SpamRule(
        "spam vocabulary",
        re.compile(r"\b(viagra|cialis|pharmacy|casino|lottery|winner)\b", re.IGNORECASE),
        weight=2,
        per_match=False,
    ),
    SpamRule(
        "call to action",
        re.compile(r"\b(click here|visit now|act now|limited time)\b", re.IGNORECASE),
        weight=2,
        per_match=False,
    ),
    SpamRule("money amounts", re.compile(r"\$\d+")),
    SpamRule("links", re.compile(r"https?://")),
    SpamRule("shouting", re.compile(r"\b[A-Z]{5,}\b")),
]

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()_+={}\[\]|\\:\";'<>?,./]")


@dataclass
class SpamAssessment:
    """Spam heuristics outcome."""

    is_spam: bool = False
    score: int = 0
    indicators: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"isSpam": self.is_spam, "score": self.score, "indicators": list(self.indicators)}


def assess_spam(
    name: str,
    email: str,
    message: str,
    config: FormConfig = FORM,
    email_validator: Optional[EmailValidator] = None,
) -> SpamAssessment:
    """
    Score a submission against the spam heuristics.

    Scores:
        - SPAM_RULES over the message
        - +2 for a one-word name with a message over 50 words
        - +1 when special characters exceed 10% of the message
        - +2 for a disposable e-mail domain
    """
    assessment = SpamAssessment()

    for rule in SPAM_RULES:
        matches = rule.pattern.findall(message)
        if not matches:
            continue
        points = rule.weight * (len(matches) if rule.per_match else 1)
        assessment.score += points
        assessment.indicators.append(f"Spam pattern detected: {rule.name} (+{points})")

    if len(name.split()) < 2 and len(message.split()) > 50:
        assessment.score += 2
        assessment.indicators.append("Suspicious name/message length ratio")

    if len(SPECIAL_CHARACTERS.findall(message)) > len(message) * 0.1:
        assessment.score += 1
        assessment.indicators.append("Excessive special characters")

    if (email_validator or EmailValidator(config)).is_disposable(email):
        assessment.score += 2
        assessment.indicators.append("Disposable email domain")

    assessment.is_spam = assessment.score >= config.spam_threshold
    return assessment


# ----- Contact form -----


@dataclass
class FormValidationResult:
    """Merged verdict of every form stage."""

    valid: bool
    data: Optional[ContactSubmission] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    spam: SpamAssessment = field(default_factory=SpamAssessment)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "spam": self.spam.to_dict(),
        }


class ContactFormValidator:
    """Composes every contact-form stage into one verdict."""

    def __init__(
        self,
        config: FormConfig = FORM,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[FolioLogger] = None,
        rate_limiter: Optional[RateLimiter] = None,
        rate_limit_config: RateLimitConfig = RATE_LIMIT,
    ):
        """
        Initialize contact form validator.

        Args:
            config: Form thresholds
            clock: Returns the current UTC time (injectable for tests)
            logger: Optional logger instance
            rate_limiter: Limiter used by `check_rate_limit`
            rate_limit_config: Contact attempt allowance
        """
        self.config = config
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger
        self.rate_limiter = rate_limiter
        self.rate_limit_config = rate_limit_config
        self.email_validator = EmailValidator(config)
        self.honeypot = HoneypotValidator(config)

    def validate_submission(self, raw: Any) -> FormValidationResult:
        """
        Run every stage over a raw submission.

        Args:
            raw: Submission payload (normally a decoded JSON object)

        Returns:
            FormValidationResult; `valid` is False when any error was found
        """
        log = safe_logger(self.logger)
        errors: List[str] = []
        warnings: List[str] = []

        # 1. Schema (the honeypot has its own stage)
        if isinstance(raw, Mapping):
            schema_input: Any = {k: v for k, v in raw.items() if k != "honeypot"}
        else:
            schema_input = raw
        schema = validate_contact_submission(schema_input)
        if not schema.success:
            errors.extend(f"{e.field}: {e.message}" for e in schema.errors)

        fields: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

        # 2. Honeypot
        if self.honeypot.check_honeypot(fields.get("honeypot")):
            errors.append(HONEYPOT_MESSAGE)
            log.log_warning("Contact form honeypot triggered")

        # 3. Timestamp
        reason = self.honeypot.check_timestamp(fields.get("timestamp"), self.clock())
        if reason:
            warnings.append(reason)

        if not schema.success:
            return FormValidationResult(False, None, errors, warnings)

        submission: ContactSubmission = schema.data

        # 4. E-mail
        email_check = self.email_validator.validate(submission.email)
        errors.extend(email_check.errors)
        warnings.extend(email_check.warnings)

        # 5. Sanitise, then re-check lengths
        name = TextSanitizer.sanitize_text(
            submission.name, max_length=self.config.name_max_length
        )
        message = TextSanitizer.sanitize_text(
            submission.message,
            allow_markdown=True,
            max_length=self.config.message_max_length,
        )
        subject = (
            TextSanitizer.sanitize_text(
                submission.subject, max_length=self.config.subject_max_length
            )
            if submission.subject
            else None
        )
        for text, low, high, label in (
            (name, 1, self.config.name_max_length, "Name"),
            (
                message,
                self.config.message_min_length,
                self.config.message_max_length,
                "Message",
            ),
        ):
            error = TextSanitizer.validate_text_length(text, low, high, label)
            if error:
                errors.append(error)

        # 6. Spam (scored on what the visitor typed)
        spam = assess_spam(
            submission.name,
            submission.email,
            submission.message,
            self.config,
            self.email_validator,
        )
        if spam.is_spam:
            warnings.append(f"Submission flagged as likely spam (score {spam.score})")
            log.log_warning("Contact submission flagged as spam", spam.to_dict())

        sanitized = replace(
            submission,
            name=name,
            message=message,
            subject=subject,
            honeypot=fields.get("honeypot") if isinstance(fields.get("honeypot"), str) else None,
        )
        result = FormValidationResult(not errors, sanitized, errors, warnings, spam)
        log.log_operation(
            "contact_form_validation",
            {"valid": result.valid, "errors": len(errors), "spam_score": spam.score},
        )
        return result

    def validate_spam_indicators(self, submission: ContactSubmission) -> SpamAssessment:
        """Score an already-validated submission."""
        return assess_spam(
            submission.name,
            submission.email,
            submission.message,
            self.config,
            self.email_validator,
        )

    def check_rate_limit(
        self, email: Optional[str], user_agent: Optional[str] = None
    ) -> RateLimitDecision:
        """
        Count a contact attempt for the sender.

        The e-mail address identifies the sender, falling back to the user
        agent and then to a shared 'anonymous' bucket.
        """
        if self.rate_limiter is None:
            self.rate_limiter = RateLimiter(
                max_attempts=self.rate_limit_config.max_attempts,
                window_seconds=self.rate_limit_config.window_seconds,
            )
        identifier = email or user_agent or "anonymous"
        return self.rate_limiter.check(
            identifier,
            max_attempts=self.rate_limit_config.contact_max_attempts,
            window_seconds=self.rate_limit_config.window_seconds,
        )
