"""Plain transactional e-mail bodies."""

from __future__ import annotations

from html import escape

from contentlynk.services.email import EmailMessage

BRAND = "ContentLynk"


def _layout(heading: str, paragraphs: list[str], link: tuple[str, str] | None = None) -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    if link is not None:
        label, url = link
        body += f'<p><a href="{escape(url, quote=True)}">{escape(label)}</a></p>'
    return (
        "<!DOCTYPE html><html><body>"
        f"<h1>{BRAND}</h1><h2>{escape(heading)}</h2>{body}"
        "</body></html>"
    )


def verification_email(to: str, username: str, verification_url: str, ttl_hours: int) -> EmailMessage:
    html = _layout(
        "Verify your email address",
        [
            f"Hi <strong>{escape(username)}</strong>,",
            "Please verify your email address to complete your registration.",
            f"This link expires in {ttl_hours} hours.",
        ],
        ("Verify Email Address", verification_url),
    )
    text = (
        f"Hi {username},\n\nVerify your email address: {verification_url}\n\n"
        f"This link expires in {ttl_hours} hours."
    )
    return EmailMessage(to=to, subject=f"Verify your {BRAND} email", html=html, text=text)


def welcome_email(to: str, username: str, display_name: str | None, dashboard_url: str) -> EmailMessage:
    name = display_name or username
    html = _layout(
        f"Welcome, {name}!",
        ["Your email is verified and your creator account is ready."],
        ("Go to your dashboard", dashboard_url),
    )
    text = f"Welcome, {name}!\n\nYour account is ready: {dashboard_url}"
    return EmailMessage(to=to, subject=f"Welcome to {BRAND}!", html=html, text=text)


def beta_confirmation_email(to: str, name: str) -> EmailMessage:
    html = _layout(
        "Beta application received",
        [
            f"Hi {escape(name)},",
            "Thanks for applying to the beta. We review every application and will email you soon.",
        ],
    )
    text = f"Hi {name},\n\nThanks for applying to the {BRAND} beta. We will be in touch soon."
    return EmailMessage(to=to, subject=f"Beta Application Received - {BRAND}", html=html, text=text)


def beta_approved_email(
    to: str,
    name: str,
    username: str,
    temp_password: str | None,
    login_url: str,
    beta_tester_number: int,
) -> EmailMessage:
    paragraphs = [
        f"Hi {escape(name)}, your application has been approved.",
        f"Username: <strong>{escape(username)}</strong>",
    ]
    text = f"Hi {name},\n\nYou're beta tester #{beta_tester_number}.\nUsername: {username}\n"
    if temp_password:
        # Only accounts created on approval get a password; existing ones keep theirs.
        paragraphs += [
            f"Temporary password: <strong>{escape(temp_password)}</strong>",
            "Please change your password after signing in.",
        ]
        text += f"Temporary password: {temp_password}\n"
    html = _layout(f"You're beta tester #{beta_tester_number}!", paragraphs, ("Sign in", login_url))
    text += f"\nSign in: {login_url}"
    return EmailMessage(to=to, subject=f"Welcome to the {BRAND} beta!", html=html, text=text)


def beta_rejected_email(to: str, name: str, waitlist_url: str) -> EmailMessage:
    html = _layout(
        "About your beta application",
        [
            f"Hi {escape(name)},",
            "We can't offer you a beta spot right now, but you can join the waitlist for the next cohort.",
        ],
        ("Join the waitlist", waitlist_url),
    )
    text = f"Hi {name},\n\nJoin the waitlist for the next cohort: {waitlist_url}"
    return EmailMessage(to=to, subject=f"Your {BRAND} beta application", html=html, text=text)


def waitlist_confirmation_email(to: str, name: str) -> EmailMessage:
    html = _layout(
        "You're on the waitlist",
        [f"Hi {escape(name)},", "We'll email you as soon as a spot opens up."],
    )
    text = f"Hi {name},\n\nYou're on the {BRAND} waitlist. We'll email you when a spot opens."
    return EmailMessage(to=to, subject=f"You're on the {BRAND} waitlist", html=html, text=text)
