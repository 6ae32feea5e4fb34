"""
Notification e-mail templates.

Each template has a subject, a plain-text body and an HTML body, rendered
with `str.format_map` against the data passed to the mailer.
"""

from dataclasses import dataclass
from html import escape
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    plain_body: str
    html_body: str

    def render(self, data: Mapping[str, Any]) -> Dict[str, str]:
        escaped = {key: escape(str(value)) for key, value in data.items()}
        return {
            "subject": self.subject.format_map(data),
            "plain_body": self.plain_body.format_map(data),
            "html_body": self.html_body.format_map(escaped),
        }


TEMPLATES: Dict[str, EmailTemplate] = {
    "user_welcome": EmailTemplate(
        subject="Welcome to Greenlight!",
        plain_body=(
            "Hi,\n\n"
            "Thanks for signing up for a Greenlight account. We're excited to have you on board!\n\n"
            "For future reference, your user ID number is {userID}.\n\n"
            "Please send a request to the `PUT /v1/users/activated` endpoint with the following "
            "JSON body to activate your account:\n\n"
            '{{"token": "{activationToken}"}}\n\n'
            "Please note that this is a one-time use token and it will expire in {expiresIn}.\n\n"
            "Thanks,\n\nThe Greenlight Team\n"
        ),
        html_body=(
            "<!doctype html><html><body>"
            "<p>Hi,</p>"
            "<p>Thanks for signing up for a Greenlight account. We're excited to have you on board!</p>"
            "<p>For future reference, your user ID number is {userID}.</p>"
            "<p>Please send a request to the <code>PUT /v1/users/activated</code> endpoint with the "
            "following JSON body to activate your account:</p>"
            '<pre><code>{{"token": "{activationToken}"}}</code></pre>'
            "<p>Please note that this is a one-time use token and it will expire in {expiresIn}.</p>"
            "<p>Thanks,</p><p>The Greenlight Team</p>"
            "</body></html>"
        ),
    ),
    "token_activation": EmailTemplate(
        subject="Activate your Greenlight account",
        plain_body=(
            "Hi,\n\n"
            "Please send a `PUT /v1/users/activated` request with the following JSON body to "
            "activate your account:\n\n"
            '{{"token": "{activationToken}"}}\n\n'
            "Please note that this is a one-time use token and it will expire in {expiresIn}.\n\n"
            "Thanks,\n\nThe Greenlight Team\n"
        ),
        html_body=(
            "<!doctype html><html><body>"
            "<p>Hi,</p>"
            "<p>Please send a <code>PUT /v1/users/activated</code> request with the following JSON "
            "body to activate your account:</p>"
            '<pre><code>{{"token": "{activationToken}"}}</code></pre>'
            "<p>Please note that this is a one-time use token and it will expire in {expiresIn}.</p>"
            "<p>Thanks,</p><p>The Greenlight Team</p>"
            "</body></html>"
        ),
    ),
    "token_password_reset": EmailTemplate(
        subject="Reset your Greenlight password",
        plain_body=(
            "Hi,\n\n"
            "Please send a `PUT /v1/users/password` request with the following JSON body to set "
            "a new password:\n\n"
            '{{"password": "your new password", "token": "{passwordResetToken}"}}\n\n'
            "Please note that this is a one-time use token and it will expire in {expiresIn}.\n\n"
            "Thanks,\n\nThe Greenlight Team\n"
        ),
        html_body=(
            "<!doctype html><html><body>"
            "<p>Hi,</p>"
            "<p>Please send a <code>PUT /v1/users/password</code> request with the following JSON "
            "body to set a new password:</p>"
            '<pre><code>{{"password": "your new password", "token": "{passwordResetToken}"}}</code></pre>'
            "<p>Please note that this is a one-time use token and it will expire in {expiresIn}.</p>"
            "<p>Thanks,</p><p>The Greenlight Team</p>"
            "</body></html>"
        ),
    ),
}
