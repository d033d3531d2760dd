#!/usr/bin/env python3
"""
Scheduler daemon for extension_audit

Runs the audit on the AUDIT_SCHEDULE cron expression, or once on demand.

Usage:
    python -m scheduler.runner --start --enable    # block and run on schedule
    python -m scheduler.runner --run-now --force   # one audit, then exit
    python -m scheduler.runner --list-jobs
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from audit.config import LOGGER_NAME
from scheduler.jobs import AuditJob, JobConfig, JobRun


logger = logging.getLogger(f"{LOGGER_NAME}.scheduler")


def cron_trigger(schedule: str) -> CronTrigger:
    """Build a CronTrigger from a 5-field cron expression."""
    fields = schedule.split()
    if len(fields) != 5:
        raise ValueError(f"Expected 5 cron fields, got {len(fields)}: {schedule!r}")

    minute, hour, day, month, day_of_week = fields
    return CronTrigger(minute=minute, hour=hour, day=day, month=month, day_of_week=day_of_week)


class AuditScheduler:
    """
    Holds the audit jobs and drives them from a BlockingScheduler.

    Only enabled jobs are put on the cron schedule; every registered job
    can still be run by name.
    """

    def __init__(self, scheduler: Optional[BlockingScheduler] = None):
        self.jobs: Dict[str, AuditJob] = {}
        self._scheduler = scheduler or BlockingScheduler()

    def add_job(self, job: AuditJob) -> None:
        self.jobs[job.config.name] = job

        if not job.config.enabled:
            logger.info(f"Registered {job.config.name} (disabled, manual runs only)")
            return

        self._scheduler.add_job(
            func=job.execute,
            trigger=cron_trigger(job.config.schedule),
            id=job.config.name,
            name=job.config.name,
            replace_existing=True,
        )
        logger.info(f"Scheduled {job.config.name} at '{job.config.schedule}'")

    def run_job(self, job_name: str, force: bool = False) -> Optional[JobRun]:
        """Run a registered job now; returns None for an unknown name."""
        job = self.jobs.get(job_name)
        if job is None:
            logger.error(f"Job not found: {job_name}")
            return None
        return job.execute(force=force)

    def start(self) -> None:
        """Block running scheduled jobs until interrupted."""
        logger.info("Scheduler started. Press Ctrl+C to stop.")
        try:
            self._scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped.")

    def list_jobs(self) -> None:
        print("\nRegistered Jobs:")
        print("-" * 60)

        for name, job in self.jobs.items():
            print(f"  {name}")
            print(f"    Schedule: {job.config.schedule}")
            print(f"    Label: {job.config.label_name or '(from configuration)'}")
            print(f"    Status: {'enabled' if job.config.enabled else 'disabled'}")

            if job.last_run:
                result = "SUCCESS" if job.last_run.success else "FAILED"
                print(f"    Last Run: {job.last_run.started_at} ({result})")
            print()


def main():
    """Command-line interface for the scheduler."""
    parser = argparse.ArgumentParser(
        description="extension_audit scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scheduler.runner --list-jobs
  python -m scheduler.runner --run-now --force     # Run the audit now
  python -m scheduler.runner --start --enable      # Run on AUDIT_SCHEDULE

The job is disabled unless --enable (with --start) or --force (with --run-now) is given.
        """
    )

    parser.add_argument("--start", action="store_true", help="Start the scheduler daemon")
    parser.add_argument("--run-now", action="store_true", help="Run the audit immediately")
    parser.add_argument("--list-jobs", action="store_true", help="List configured jobs")
    parser.add_argument("--force", action="store_true", help="Run even if the job is disabled")
    parser.add_argument("--enable", action="store_true", help="Enable the job (used with --start)")

    args = parser.parse_args()

    from audit.config import ConfigurationError, get_config, setup_logging

    try:
        config = get_config()
    except ConfigurationError as e:
        print(e)
        return 1

    setup_logging(config)

    job = AuditJob(JobConfig(name="extension_audit", enabled=args.enable, schedule=config.schedule))
    scheduler = AuditScheduler()
    scheduler.add_job(job)

    if args.list_jobs:
        scheduler.list_jobs()
        return 0

    if args.run_now:
        try:
            result = scheduler.run_job(job.config.name, force=args.force)
        except Exception as e:
            print(f"\nJob failed: {e}")
            return 1

        if not result.success:
            print(f"\nJob did not run: {result.error_message}")
            return 1

        print("\nJob completed successfully!")
        print(f"  Accounts audited: {result.accounts_audited}")
        print(f"  Accounts flagged: {result.accounts_flagged}")
        print(f"  Email sent: {'yes' if result.email_sent else 'no'}")
        return 0

    if args.start:
        scheduler.start()
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
