"""Profiling orchestrator: validates a request, loads columns and assembles profiles."""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from config import Settings, get_settings
from core.exceptions import DataLoadFailure, FieldNotFoundError, InvalidSelectionError
from logger import get_logger, run_id_var
from schemas.profiling import (
    ColumnProfile,
    NumericSummary,
    ProfilingRequest,
    ProfilingResult,
    ProfilingState,
    QualityAssessment,
    TemporalSummary,
    TextSummary,
)
from services.column_provider import ColumnProvider
from services.column_values import scan_column
from services.data_quality_service import DataQualityAssessor
from services.frequency_service import FrequencyDistributionBuilder
from services.numeric_statistics_service import NumericStatisticsEngine
from services.temporal_analysis_service import TemporalAnalysisEngine
from services.text_analysis_service import TextAnalysisEngine

logger = get_logger(__name__)

EMPTY_DATASET_WARNING = "Dataset contains no rows; profiles report zero counts"


def large_dataset_warning(total_rows: int) -> str:
    return (
        f"Dataset has {total_rows:,} rows; profiling loads every selected column "
        "into memory and may take a while"
    )


@dataclass(frozen=True)
class FieldOutcome:
    """Result of profiling one field: a profile, an error, or both."""

    field_name: str
    profile: ColumnProfile | None = None
    error: str | None = None


class ProfilingOrchestrator:
    """Runs the profiling pipeline for up to three fields of one dataset.

    The column provider is injected; the orchestrator keeps no per-run state
    on the instance, so one instance may serve concurrent requests.
    """

    def __init__(
        self,
        provider: ColumnProvider,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or get_settings()
        profiling = self.settings.profiling
        self.builder = FrequencyDistributionBuilder(profiling)
        self.numeric_engine = NumericStatisticsEngine(profiling)
        self.text_engine = TextAnalysisEngine()
        self.temporal_engine = TemporalAnalysisEngine(profiling)
        self.assessor = DataQualityAssessor(
            self.settings.quality,
            top_duplicates_limit=profiling.top_duplicates_limit,
        )
        self.logger = logger.bind(component=self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, request: ProfilingRequest) -> None:
        """Reject empty, oversized or duplicate field selections."""
        names = list(request.field_names)
        max_fields = self.settings.profiling.max_fields
        if not names:
            raise InvalidSelectionError("at least one field must be selected", names)
        if len(names) > max_fields:
            raise InvalidSelectionError(
                f"at most {max_fields} fields can be profiled per request (got {len(names)})",
                names,
            )
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidSelectionError(f"duplicate field names: {', '.join(duplicates)}", names)

    # -------------------------------------------------------------------------
    # Per-field pipeline
    # -------------------------------------------------------------------------

    def _load(self, field_name: str, total_rows: int) -> Sequence[Any]:
        try:
            values = self.provider.get_column_values(field_name)
        except FieldNotFoundError:
            raise
        except KeyError:
            raise FieldNotFoundError(field_name) from None
        except Exception as exc:
            raise DataLoadFailure(field_name, f"{type(exc).__name__}: {exc}") from exc
        if values is None:
            raise DataLoadFailure(field_name, "provider returned no values")
        if len(values) != total_rows:
            raise DataLoadFailure(
                field_name,
                f"expected {total_rows} values, provider returned {len(values)}",
            )
        return values

    def profile_field(self, field_name: str, total_rows: int) -> FieldOutcome:
        """Profile one field, isolating any failure to this field."""
        try:
            values = self._load(field_name, total_rows)
        except (FieldNotFoundError, DataLoadFailure) as exc:
            self.logger.warning("Field load failed", field_name=field_name, error=exc.message)
            return FieldOutcome(field_name, error=exc.message)

        profiling = self.settings.profiling
        try:
            table = self.builder.build(values, total_rows)
            scan = scan_column(
                values,
                numeric_threshold=profiling.numeric_threshold,
                text_threshold=profiling.text_threshold,
            )
        except Exception as exc:
            self.logger.exception("Frequency distribution failed", field_name=field_name)
            return FieldOutcome(field_name, error=f"{type(exc).__name__}: {exc}")

        numeric_summary: NumericSummary | None = None
        text_summary: TextSummary | None = None
        temporal_summary: TemporalSummary | None = None
        quality: QualityAssessment | None = None
        error: str | None = None
        try:
            if scan.kind == "Numeric":
                numeric_summary = self.numeric_engine.summarize_scan(scan)
            elif scan.kind in ("Text", "Mixed"):
                text_summary = self.text_engine.analyze(values)
                temporal_summary = self.temporal_engine.analyze(values)
            quality = self.assessor.assess(table)
        except Exception as exc:
            self.logger.exception("Field statistics failed", field_name=field_name)
            numeric_summary = text_summary = temporal_summary = quality = None
            error = f"{type(exc).__name__}: {exc}"

        profile = ColumnProfile(
            field_name=field_name,
            kind=scan.kind,
            total_rows=table.total_rows,
            unique_value_count=table.unique_value_count,
            null_count=table.null_count,
            empty_string_count=table.empty_string_count,
            distribution=table.distribution,
            truncated=table.truncated,
            numeric_summary=numeric_summary,
            text_summary=text_summary,
            temporal_summary=temporal_summary,
            quality=quality,
            error=error,
        )
        return FieldOutcome(field_name, profile=profile, error=error)

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def _compute(self, field_names: list[str], total_rows: int) -> list[FieldOutcome]:
        workers = min(self.settings.profiling.max_workers, len(field_names))
        if workers <= 1:
            return [self.profile_field(name, total_rows) for name in field_names]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="profiler") as pool:
            futures = [
                pool.submit(contextvars.copy_context().run, self.profile_field, name, total_rows)
                for name in field_names
            ]
            return [f.result() for f in futures]

    def profile(self, request: ProfilingRequest) -> ProfilingResult:
        """Run the full pipeline and return one profile per loadable field.

        Raises:
            InvalidSelectionError: If the field selection is rejected.
        """
        token = run_id_var.set(uuid.uuid4().hex)
        try:
            return self._run(request)
        finally:
            run_id_var.reset(token)

    def _transition(self, state: ProfilingState, **context: Any) -> ProfilingState:
        self.logger.debug("Profiling state", state=state, **context)
        return state

    def _run(self, request: ProfilingRequest) -> ProfilingResult:
        field_names = list(request.field_names)
        self._transition("VALIDATING", fields=field_names)
        self.validate(request)

        self._transition("LOADING")
        try:
            total_rows = int(self.provider.get_total_row_count())
        except Exception as exc:
            message = f"Failed to read row count: {type(exc).__name__}: {exc}"
            self.logger.error("Row count unavailable", error=message)
            return ProfilingResult(
                state=self._transition("FAILED"),
                errors={name: message for name in field_names},
            )

        warnings: list[str] = []
        if total_rows > self.settings.profiling.large_dataset_rows:
            warnings.append(large_dataset_warning(total_rows))
            if not request.proceed_despite_size_warning:
                self.logger.info("Awaiting confirmation for large dataset", total_rows=total_rows)
                return ProfilingResult(
                    state=self._transition("AWAITING_CONFIRMATION"),
                    total_rows=total_rows,
                    warnings=warnings,
                    requires_confirmation=True,
                )
        if total_rows == 0:
            warnings.append(EMPTY_DATASET_WARNING)

        self._transition("COMPUTING", total_rows=total_rows)
        self.logger.info("Profiling started", fields=field_names, total_rows=total_rows)
        outcomes = self._compute(field_names, total_rows)

        per_field = [o.profile for o in outcomes if o.profile is not None]
        errors = {o.field_name: o.error for o in outcomes if o.error is not None}
        state: ProfilingState = "ASSEMBLED" if per_field else "FAILED"
        self.logger.info(
            "Profiling finished",
            state=state,
            profiled=len(per_field),
            failed=len(errors),
        )
        return ProfilingResult(
            state=self._transition(state),
            total_rows=total_rows,
            per_field=per_field,
            warnings=warnings,
            errors=errors,
        )
