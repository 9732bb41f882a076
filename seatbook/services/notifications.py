import logging
import smtplib
import time
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import List, Optional

from fastapi import BackgroundTasks

from seatbook.core.config import Settings, settings as default_settings
from seatbook.services.side_effects import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationSeat:
    row_name: str
    row_type: str
    seat_number: int
    first_name: str
    last_name: str


@dataclass
class ConfirmationJob:
    user_email: str
    user_name: str
    seats: List[ConfirmationSeat]

    @property
    def total_seats(self) -> int:
        return len(self.seats)


@dataclass
class NotificationResult:
    success: bool
    detail: str


class NotificationFailed(Exception):
    """Raised inside a queued job so the retry policy attempts it again."""


def _render_confirmation(job: ConfirmationJob) -> str:
    seat_lines = "<br>".join(
        f"<strong>{escape(s.row_type)} - Row {escape(s.row_name)}, Seat {s.seat_number}"
        f" - {escape(s.first_name)} {escape(s.last_name)}</strong>"
        for s in job.seats
    )
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #2c3e50;">Booking Confirmation</h2>
          <p>Dear {escape(job.user_name)},</p>
          <p>We have received your payment and your booking is now confirmed.</p>
          <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px;">
            <p><strong>Booking Name:</strong> {escape(job.user_name)}</p>
            <p><strong>Total Seats:</strong> {job.total_seats}</p>
            <p><strong>Seat Details:</strong></p>
            <div>{seat_lines}</div>
          </div>
          <p>Please keep this email as your booking confirmation.</p>
          <p style="color: #6c757d; font-size: 14px;">
            This is an automated message. Please do not reply to this email.
          </p>
        </div>
    """


class EmailSender:
    """SMTP sender. Never raises: every outcome is reported as a NotificationResult."""

    def __init__(self, settings: Settings = default_settings):
        self.settings = settings

    @property
    def configured(self) -> bool:
        return bool(self.settings.EMAIL_USER and self.settings.EMAIL_PASS)

    def build_message(self, job: ConfirmationJob) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "Booking Confirmation - Payment Received"
        msg["From"] = f'"{self.settings.EMAIL_FROM_NAME}" <{self.settings.EMAIL_USER}>'
        msg["To"] = job.user_email
        msg.set_content(
            f"Dear {job.user_name}, your payment was received and your "
            f"{job.total_seats} seat(s) are confirmed."
        )
        msg.add_alternative(_render_confirmation(job), subtype="html")
        return msg

    def send_booking_confirmation(self, job: ConfirmationJob) -> NotificationResult:
        if not self.configured:
            logger.error("Cannot send email: EMAIL_USER and EMAIL_PASS are not configured")
            return NotificationResult(success=False, detail="Email configuration missing")

        try:
            with smtplib.SMTP_SSL(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=30) as smtp:
                smtp.login(self.settings.EMAIL_USER, self.settings.EMAIL_PASS)
                smtp.send_message(self.build_message(job))
        except smtplib.SMTPAuthenticationError:
            logger.error("Email authentication failed for %s", self.settings.EMAIL_USER)
            return NotificationResult(
                success=False,
                detail="Email authentication failed. Please check your email credentials.",
            )
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send confirmation to %s: %s", job.user_email, exc)
            return NotificationResult(success=False, detail=f"Failed to send email: {exc}")

        logger.info("Confirmation email sent to %s", job.user_email)
        return NotificationResult(success=True, detail="Email sent successfully")


class NotificationQueue:
    """
    Confirmation emails run as background jobs after the response is sent.

    A job is attempted NOTIFY_MAX_ATTEMPTS times with exponential backoff
    starting at NOTIFY_BACKOFF_SECONDS. When no background runner is available
    (or scheduling fails) the email is sent once, synchronously.
    """

    def __init__(self, sender: Optional[EmailSender] = None, settings: Settings = default_settings, sleep=time.sleep):
        self.sender = sender or EmailSender(settings)
        self.settings = settings
        self.sleep = sleep

    def _attempt(self, job: ConfirmationJob) -> NotificationResult:
        result = self.sender.send_booking_confirmation(job)
        if not result.success:
            raise NotificationFailed(result.detail)
        return result

    def run_job(self, job: ConfirmationJob) -> bool:
        policy = RetryPolicy(
            max_attempts=self.settings.NOTIFY_MAX_ATTEMPTS,
            backoff_seconds=self.settings.NOTIFY_BACKOFF_SECONDS,
            retry_on=(NotificationFailed,),
            sleep=self.sleep,
        )
        return policy.run(f"confirmation email to {job.user_email}", self._attempt, job).ok

    def send_now(self, job: ConfirmationJob) -> bool:
        result = RetryPolicy().run(f"direct confirmation email to {job.user_email}", self._attempt, job)
        return result.ok

    def enqueue_confirmation(self, job: ConfirmationJob, background_tasks: Optional[BackgroundTasks] = None) -> bool:
        """Returns True when the job was queued, False when it was sent (or attempted) directly."""
        if background_tasks is not None:
            try:
                background_tasks.add_task(self.run_job, job)
                logger.info("Email job queued for %s (%d seats)", job.user_email, job.total_seats)
                return True
            except Exception:
                logger.exception("Failed to queue email job; sending directly")
        self.send_now(job)
        return False
