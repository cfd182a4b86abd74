# -*- coding: utf-8 -*-
from django.conf import settings
from django.core.management.base import BaseCommand

from leaves.services.notification_service import resend_undelivered


class Command(BaseCommand):
    help = "Retry undelivered leave e-mail notifications (bounded by NOTIFICATION_MAX_ATTEMPTS)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-attempts", type=int,
            default=settings.LEAVE_WORKFLOW.get("NOTIFICATION_MAX_ATTEMPTS", 5),
            help="Skip notifications that already failed this many times.",
        )

    def handle(self, *args, **opts):
        sent, failed = resend_undelivered(max_attempts=opts["max_attempts"])
        self.stdout.write(self.style.SUCCESS(f"Resent {sent} notification(s); {failed} still failing."))
