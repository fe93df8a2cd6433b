from django.core.management.base import BaseCommand, CommandError

from economy.exceptions import WalletNotFound
from economy.services import WalletService


class Command(BaseCommand):
    help = "Compares wallet balances with the sum of their ledger entries"

    def add_arguments(self, parser):
        parser.add_argument(
            "user_ids",
            nargs="*",
            help="Only check these users' wallets (default: every wallet).",
        )

    def handle(self, *args, **options):
        if options["user_ids"]:
            try:
                reports = [WalletService.reconcile(uid) for uid in options["user_ids"]]
            except WalletNotFound as exc:
                raise CommandError(str(exc))
        else:
            reports = WalletService.reconcile_all()

        mismatched = 0
        for report in reports:
            if report["consistent"]:
                self.stdout.write(f"{report['wallet_id']}: balance={report['balance']} OK")
            else:
                mismatched += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"{report['wallet_id']}: balance={report['balance']} "
                        f"ledger_total={report['ledger_total']} MISMATCH"
                    )
                )

        if mismatched:
            raise CommandError(f"{mismatched} of {len(reports)} wallet(s) out of balance.")
        self.stdout.write(self.style.SUCCESS(f"{len(reports)} wallet(s) reconciled."))
