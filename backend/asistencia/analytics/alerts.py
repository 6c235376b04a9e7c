"""
Threshold advisories derived from the organization KPIs.

Alerts are emitted most severe first, in a fixed order, and capped at
``MAX_ALERTS``.
"""

from datetime import datetime, timezone

from asistencia.schemas.analytics import Alert, OrganizationKPIs

CRITICAL_ABSENTEEISM_RATE = 20.0
ELEVATED_ABSENTEEISM_RATE = 10.0
CRITICAL_LATE_COUNT = 10
ATTENDANCE_DROP_DELTA = -3
EXCELLENT_ATTENDANCE_RATE = 95.0
MAX_ALERTS = 5


def generate_alerts(kpis: OrganizationKPIs, now: datetime | None = None) -> list[Alert]:
    timestamp = now or datetime.now(timezone.utc)
    alerts: list[Alert] = []

    if kpis.absenteeism_rate > CRITICAL_ABSENTEEISM_RATE:
        alerts.append(
            Alert(
                id="high-absenteeism",
                severity="critical",
                title="Ausentismo Crítico",
                description=f"{kpis.absenteeism_rate:.1f}% de ausentismo hoy",
                timestamp=timestamp,
            )
        )

    if kpis.late_today > CRITICAL_LATE_COUNT:
        alerts.append(
            Alert(
                id="many-late",
                severity="critical",
                title="Muchas Tardanzas",
                description=f"{kpis.late_today} empleados llegaron tarde hoy",
                timestamp=timestamp,
            )
        )

    if ELEVATED_ABSENTEEISM_RATE < kpis.absenteeism_rate <= CRITICAL_ABSENTEEISM_RATE:
        alerts.append(
            Alert(
                id="moderate-absenteeism",
                severity="warning",
                title="Ausentismo Elevado",
                description=f"{kpis.absenteeism_rate:.1f}% de ausentismo hoy",
                timestamp=timestamp,
            )
        )

    if kpis.attendance_vs_yesterday < ATTENDANCE_DROP_DELTA:
        alerts.append(
            Alert(
                id="attendance-drop",
                severity="warning",
                title="Caída en Asistencia",
                description=f"{abs(kpis.attendance_vs_yesterday)} menos asistentes que ayer",
                timestamp=timestamp,
            )
        )

    if kpis.attendance_rate > EXCELLENT_ATTENDANCE_RATE:
        alerts.append(
            Alert(
                id="excellent-attendance",
                severity="info",
                title="Excelente Asistencia",
                description=f"{kpis.attendance_rate:.1f}% de asistencia hoy",
                timestamp=timestamp,
            )
        )

    return alerts[:MAX_ALERTS]
