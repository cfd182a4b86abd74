# -*- coding: utf-8 -*-
from django.core.management.base import BaseCommand

from leaves.services.sequence_service import current_year, reseed


class Command(BaseCommand):
    help = "Re-seed a year's document-number counter from the highest number already issued."

    def add_arguments(self, parser):
        parser.add_argument("--year", type=int, default=None, help="Calendar year (default: current year).")

    def handle(self, *args, **opts):
        year = opts["year"] or current_year()
        last = reseed(year)
        self.stdout.write(self.style.SUCCESS(f"Counter {year} set to {last}; next number is {last + 1}."))
