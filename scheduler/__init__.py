"""
Scheduled execution of the disapproved extensions audit.

Command-line usage:
    python -m scheduler.runner --start --enable
    python -m scheduler.runner --run-now --force
"""

from scheduler.jobs import AuditJob, JobConfig, JobRun
from scheduler.runner import AuditScheduler

__all__ = [
    'AuditJob',
    'AuditScheduler',
    'JobConfig',
    'JobRun',
]
