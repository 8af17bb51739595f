"""Report generation for recategorization results.

Builds the per-client recategorization report handed to the taxpayer and a
summary of a whole batch run for the studio. Reports are plain text or
Markdown; amounts use the Argentine number format.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

import structlog

from .batch import BatchResult
from .category import sort_scales
from .config import RecablixConfig
from .formatters import format_ars, format_number, format_percent
from .models import (
    CategoryChange,
    RecategorizationResult,
    Scale,
    TaxpayerInput,
)
from .period_data import RecaPeriod
from .validation import province_name

logger = structlog.get_logger()

# Months in a recategorization semester
SEMESTER_MONTHS = 6

_CHANGE_LABELS = {
    CategoryChange.UP: "Sube",
    CategoryChange.DOWN: "Baja",
    CategoryChange.SAME: "Igual",
    CategoryChange.NEW: "Nuevo",
}


@dataclass
class ReportSection:
    """A section of the report."""
    title: str
    content: str


def _yes_no(value: bool) -> str:
    return "Sí" if value else "No"


def _format_text(sections: list[ReportSection]) -> str:
    output = []

    for section in sections:
        if section.title != "Header":
            output.append("")
            output.append("=" * 60)
            output.append(section.title.upper())
            output.append("=" * 60)

        output.append(section.content)

    output.append("")
    output.append("=" * 60)
    output.append("FIN DEL REPORTE")
    output.append("=" * 60)
    output.append("")
    output.append("Generado por RECABLIX")

    return "\n".join(output)


def _format_markdown(sections: list[ReportSection]) -> str:
    output = []

    for section in sections:
        if section.title == "Header":
            output.append(section.content)
        else:
            output.append(f"\n## {section.title}\n")
            output.append("```")
            output.append(section.content)
            output.append("```")

    output.append("\n---\n")
    output.append("*Generado por RECABLIX*")

    return "\n".join(output)


def _render(sections: list[ReportSection], format: str) -> str:
    if format == "markdown":
        return _format_markdown(sections)
    if format == "text":
        return _format_text(sections)
    raise ValueError(f"Unsupported report format: {format}")


class _ReportGenerator:
    """Shared state of the report generators."""

    def __init__(self, studio_name: str = "RECABLIX", currency_symbol: str = "$"):
        """Initialize the report generator.

        Args:
            studio_name: Accounting studio shown in the report header
            currency_symbol: Symbol used for amounts
        """
        self.studio_name = studio_name
        self.currency_symbol = currency_symbol
        self._sections: list[ReportSection] = []

    @classmethod
    def from_config(cls, config: RecablixConfig, studio_name: str = "RECABLIX"):
        """Create a generator using the configured currency symbol."""
        return cls(studio_name=studio_name, currency_symbol=config.currency_symbol)

    def _money(self, value: Decimal) -> str:
        return format_ars(value, symbol=self.currency_symbol)


class RecategorizationReportGenerator(_ReportGenerator):
    """
    Generate the recategorization report of one taxpayer.

    Reports include:
    - Taxpayer data
    - Determined category and monthly fee
    - Remaining billing per category ("facturando hasta")
    - Monthly fee breakdown
    - Comparison with the previous period
    """

    def generate(
        self,
        taxpayer: TaxpayerInput,
        result: RecategorizationResult,
        scales: Sequence[Scale] = (),
        period: Optional[RecaPeriod] = None,
        format: str = "text",
    ) -> str:
        """
        Generate the report for one recategorization.

        Args:
            taxpayer: Taxpayer snapshot that was evaluated
            result: Recategorization of the taxpayer
            scales: Scale rows of the period, for the billing limits table
            period: Period of the recategorization, for the title
            format: Output format ("text", "markdown")

        Returns:
            Formatted report string
        """
        self._sections = []

        self._add_header(period)
        self._add_taxpayer(taxpayer)
        self._add_category(result)
        if scales:
            self._add_billing_limits(result, scales, taxpayer.period_sales)
        self._add_fee_breakdown(result)
        # Only shown when a previous fee was recorded
        if result.comparison.previous_fee:
            self._add_comparison(result)

        logger.debug(
            "report_generated",
            taxpayer_id=taxpayer.id,
            sections=len(self._sections),
            format=format,
        )
        return _render(self._sections, format)

    def _add_header(self, period: Optional[RecaPeriod]) -> None:
        """Add report header."""
        if period:
            title = f"MONOTRIBUTO: {period.semester}° RECATEGORIZACIÓN AÑO {period.year}"
        else:
            title = "MONOTRIBUTO: RECATEGORIZACIÓN"

        content = f"""
{self.studio_name}
{title}

Fecha: {datetime.now().strftime('%d/%m/%Y')}
""".strip()

        self._sections.append(ReportSection(title="Header", content=content))

    def _add_taxpayer(self, taxpayer: TaxpayerInput) -> None:
        lines = [
            f"Nombre:            {taxpayer.name}",
            f"CUIT:              {taxpayer.cuit or '-'}",
            f"Actividad:         {taxpayer.activity.label}",
            f"Provincia IIBB:    {province_name(taxpayer.province_code) or taxpayer.province_code}",
            f"Trabaja en RD:     {_yes_no(taxpayer.works_in_rd)}",
            f"Jubilado:          {_yes_no(taxpayer.is_retired)}",
            f"Adherentes:        {taxpayer.dependents}",
        ]
        if taxpayer.local_m2:
            lines.append(f"M2 Local:          {format_number(taxpayer.local_m2)}")
        if taxpayer.annual_rent:
            lines.append(f"Alquiler Anual:    {self._money(taxpayer.annual_rent)}")
        if taxpayer.annual_mw:
            lines.append(f"Energía Anual:     {format_number(taxpayer.annual_mw)}")

        self._sections.append(
            ReportSection(title="Datos del Contribuyente", content="\n".join(lines))
        )

    def _add_category(self, result: RecategorizationResult) -> None:
        category = result.category
        details = category.details

        lines = [
            f"Categoría determinada: {category.final_category.value}",
            f"Cuota mensual:         {self._money(result.total_fee)}",
            "",
            f"{'Parámetro':<14}{'Cat':>4}{'Valor':>18}{'Tope':>18}{'Disponible':>18}",
            "-" * 72,
        ]
        rows = (
            ("Ingresos", category.category_by_income, details.income),
            ("Superficie", category.category_by_m2, details.m2),
            ("Energía", category.category_by_mw, details.mw),
            ("Alquileres", category.category_by_rent, details.rent),
        )
        for label, cat, detail in rows:
            lines.append(
                f"{label:<14}{cat.value:>4}"
                f"{format_number(detail.value):>18}"
                f"{format_number(detail.limit):>18}"
                f"{format_number(detail.headroom):>18}"
            )

        self._sections.append(
            ReportSection(title="Categoría Determinada", content="\n".join(lines))
        )

    def _add_billing_limits(
        self,
        result: RecategorizationResult,
        scales: Sequence[Scale],
        period_sales: Decimal,
    ) -> None:
        """Remaining billing per category and its monthly average."""
        current = result.category.final_category
        lines = [
            f"  {'Cat':<4}{'Tope Anual':>18}{'Facturado':>18}{'Disponible':>18}{'Prom. Mensual':>18}",
            "-" * 78,
        ]
        for scale in sort_scales(scales):
            available = scale.max_annual_income - period_sales
            if available > 0:
                average = available / SEMESTER_MONTHS
                monthly = format_number(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
            else:
                monthly = "-"
            marker = ">" if scale.category == current else " "
            lines.append(
                f"{marker} {scale.category.value:<4}"
                f"{format_number(scale.max_annual_income):>18}"
                f"{format_number(period_sales):>18}"
                f"{format_number(max(available, Decimal('0'))):>18}"
                f"{monthly:>18}"
            )

        self._sections.append(ReportSection(
            title="Facturando Hasta - Límites por Categoría",
            content="\n".join(lines),
        ))

    def _add_fee_breakdown(self, result: RecategorizationResult) -> None:
        lines = []
        for component in result.fee_components.components:
            if component.applied:
                amount = self._money(component.value)
            else:
                amount = "—"
            line = f"{component.description + ':':<46}{amount:>18}"
            if component.reason:
                line += f"  ({component.reason})"
            lines.append(line)

        lines.append("-" * 64)
        lines.append(f"{'TOTAL:':<46}{self._money(result.total_fee):>18}")

        self._sections.append(
            ReportSection(title="Desglose de Cuota Mensual", content="\n".join(lines))
        )

    def _add_comparison(self, result: RecategorizationResult) -> None:
        comparison = result.comparison
        previous_category = (
            comparison.previous_category.value if comparison.previous_category else "-"
        )
        sign = "+" if comparison.fee_change > 0 else ""

        content = f"""
Categoría anterior:  {previous_category}
Categoría nueva:     {result.category.final_category.value} ({_CHANGE_LABELS[comparison.category_change]})
Cuota anterior:      {self._money(comparison.previous_fee)}
Cuota nueva:         {self._money(result.total_fee)}
Diferencia:          {sign}{self._money(comparison.fee_change)} ({format_percent(comparison.fee_change_percent)})
""".strip()

        self._sections.append(
            ReportSection(title="Comparación con Período Anterior", content=content)
        )


class BatchSummaryReportGenerator(_ReportGenerator):
    """Generate the summary of a batch recategorization run."""

    def generate(
        self,
        batch: BatchResult,
        period: Optional[RecaPeriod] = None,
        format: str = "text",
    ) -> str:
        """
        Generate the summary of a batch run.

        Args:
            batch: Results and audit trail of the run
            period: Period of the run, for the title
            format: Output format ("text", "markdown")

        Returns:
            Formatted report string
        """
        self._sections = []

        self._add_header(batch, period)
        self._add_stats(batch)
        self._add_clients(batch)
        if batch.audit_trail.has_warnings or batch.audit_trail.has_errors:
            self._add_issues(batch)

        return _render(self._sections, format)

    def _add_header(self, batch: BatchResult, period: Optional[RecaPeriod]) -> None:
        period_code = period.code if period else (batch.audit_trail.period_code or "-")
        content = f"""
{self.studio_name}
RESUMEN DE RECATEGORIZACIÓN

Período:   {period_code}
Ejecución: {batch.audit_trail.run_id}
""".strip()

        self._sections.append(ReportSection(title="Header", content=content))

    def _add_stats(self, batch: BatchResult) -> None:
        stats = batch.stats()
        content = f"""
Clientes:            {stats.total}
Suben de categoría:  {stats.up}
Bajan de categoría:  {stats.down}
Sin cambio:          {stats.same}
Nuevos:              {stats.new}

Total cuotas anteriores: {self._money(stats.total_previous_fee)}
Total cuotas nuevas:     {self._money(stats.total_new_fee)}
""".strip()

        self._sections.append(ReportSection(title="Resumen", content=content))

    def _add_clients(self, batch: BatchResult) -> None:
        lines = [
            f"{'Cliente':<30}{'Ant':>5}{'Nueva':>7}{'Cuota':>18}{'Cambio':>9}",
            "-" * 69,
        ]
        for r in batch.results:
            previous = r.comparison.previous_category
            lines.append(
                f"{r.client.name[:29]:<30}"
                f"{previous.value if previous else '-':>5}"
                f"{r.category.final_category.value:>7}"
                f"{self._money(r.total_fee):>18}"
                f"{_CHANGE_LABELS[r.comparison.category_change]:>9}"
            )

        self._sections.append(ReportSection(title="Clientes", content="\n".join(lines)))

    def _add_issues(self, batch: BatchResult) -> None:
        trail = batch.audit_trail
        lines = []
        for error in trail.errors:
            lines.append(f"[ERROR] {error.taxpayer_id or '-'}: {error.message}")
        for warning in trail.warnings:
            lines.append(f"[{warning.severity.value}] {warning.taxpayer_id or '-'}: {warning.message}")

        self._sections.append(ReportSection(title="Observaciones", content="\n".join(lines)))
