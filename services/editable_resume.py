"""Editable projection of an analysis for the resume editor."""

from __future__ import annotations

import copy
from dataclasses import dataclass, fields

from services.models import AnalysisResult, ExtractedContent


@dataclass
class EditableResume(ExtractedContent):
    """Mutable document the editor binds its form inputs to.

    Same shape and ``to_dict`` as :class:`ExtractedContent`; only ownership
    differs, since edits land here and never in the analysis.
    """


def project_editable_resume(result: AnalysisResult) -> EditableResume:
    # Deep copies: editing the form must not rewrite the analysis.
    content = copy.deepcopy(result.extracted_content)
    return EditableResume(**{f.name: getattr(content, f.name) for f in fields(content)})


__all__ = ["EditableResume", "project_editable_resume"]
