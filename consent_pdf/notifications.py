"""
Email notifications for signed consents.

Sends a confirmation to the subject and a notice to the practitioner, with
the rendered PDF attached when it is available.

License: MIT
"""

import logging
import smtplib
from email.header import Header
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List as ListType, Optional, Union

from jinja2 import DictLoader, Environment, select_autoescape

from consent_pdf.config import Settings
from consent_pdf.models import ConsentRecord

logger = logging.getLogger(__name__)

TEMPLATES = {
    "confirmation.html": (
        "<h1>¡Gracias por tu consentimiento, {{ name }}!</h1>"
        "<p>Hemos recibido y archivado de forma segura tu consentimiento informado digital.</p>"
        "<p>Tu código de referencia es: <strong>{{ consent_id }}</strong></p>"
        "<p>Esto marca el inicio oficial de nuestro proceso de orientación. Por favor, mantente "
        "atento a las instrucciones para nuestra primera sesión.</p>"
        "<br><p>Atentamente,<br>{{ practice_name }}</p>"
    ),
    "practitioner.html": (
        "<p>Un nuevo consultante, <strong>{{ name }}</strong> ({{ email }}), ha firmado el "
        "consentimiento informado digital.{% if is_minor %} Es menor de edad; firma su "
        "representante legal {{ guardian_name }}.{% endif %} ID: {{ consent_id }}</p>"
    ),
}


class ConsentMailer:
    """SMTP mailer for consent confirmations."""

    def __init__(self, config: Settings):
        self.env = Environment(
            loader=DictLoader(TEMPLATES),
            autoescape=select_autoescape(["html", "xml"]),
        )

        self.smtp_host = config.smtp_host
        self.smtp_port = config.smtp_port
        self.smtp_user = config.smtp_user
        self.smtp_password = config.smtp_password
        self.smtp_from = config.smtp_from
        self.practitioner_email = config.practitioner_email
        self.practice_name = config.practice_name

    @property
    def enabled(self) -> bool:
        return bool(self.smtp_host)

    def _send_email(
        self,
        to_email: Union[str, ListType[str]],
        subject: str,
        html_body: str,
        attachment: Optional[bytes] = None,
        attachment_name: str = "consentimiento.pdf",
    ) -> bool:
        """
        Send an email using SMTP.

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        if not self.enabled:
            logger.warning("SMTP host not configured; skipping email")
            return False

        try:
            msg = MIMEMultipart("mixed")
            msg["Subject"] = Header(subject, "utf-8")
            msg["From"] = self.smtp_from
            msg["To"] = to_email if isinstance(to_email, str) else ", ".join(to_email)

            msg.attach(MIMEText(html_body, "html", "utf-8"))

            if attachment:
                part = MIMEApplication(attachment, _subtype="pdf")
                part.add_header("Content-Disposition", "attachment", filename=attachment_name)
                msg.attach(part)

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent to {msg['To']}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_confirmation(self, record: ConsentRecord, consent_id: str,
                          pdf_bytes: Optional[bytes] = None) -> bool:
        """Send the confirmation email to the subject."""
        html = self.env.get_template("confirmation.html").render(
            name=record.demographics.full_name,
            consent_id=consent_id,
            practice_name=self.practice_name,
        )
        return self._send_email(
            record.demographics.email,
            f"Confirmación de consentimiento - {self.practice_name}",
            html,
            attachment=pdf_bytes,
        )

    def send_practitioner_notice(self, record: ConsentRecord, consent_id: str,
                                 pdf_bytes: Optional[bytes] = None) -> bool:
        """Notify the practitioner of a new signed consent."""
        if not self.practitioner_email:
            logger.warning("Practitioner email not configured; skipping notice")
            return False

        guardian = record.guardian
        html = self.env.get_template("practitioner.html").render(
            name=record.demographics.full_name,
            email=record.demographics.email,
            consent_id=consent_id,
            is_minor=record.is_minor,
            guardian_name=guardian.name if guardian else "",
        )
        return self._send_email(
            self.practitioner_email,
            f"NUEVO CONSENTIMIENTO - {record.demographics.full_name}",
            html,
            attachment=pdf_bytes,
            attachment_name=f"consentimiento-{consent_id}.pdf",
        )
