"""Signals emitted by the dashboard pipeline.

`dashboard_updated` is sent with `sender=<ReactivePipeline>` and an `update`
keyword argument holding a `classroom.pipeline.DashboardUpdate`.
"""

from __future__ import annotations

from django.dispatch import Signal

dashboard_updated = Signal()
