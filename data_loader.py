# data_loader.py

from pathlib import Path
from typing import Union

from services.errors import UnsupportedResumeFormat

MAX_RESUME_BYTES = 10 * 1024 * 1024

PASTE_INSTEAD = {
    ".pdf": "For PDF files, please copy and paste your resume content instead",
    ".doc": "For Word documents, please copy and paste your resume content instead",
    ".docx": "For Word documents, please copy and paste your resume content instead",
}


def _read_txt(path: Union[str, Path]) -> str:
    return Path(path).read_text(encoding="utf-8", errors="ignore")


def load_resume(file_path: Union[str, Path]) -> str:
    """
    Load and return raw text from a plain-text resume (.txt).

    Binary formats are refused; the user is asked to paste the text instead.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"No such file: {path}")

    ext = path.suffix.lower()
    if ext in PASTE_INSTEAD:
        raise UnsupportedResumeFormat(PASTE_INSTEAD[ext])
    if ext != ".txt":
        raise UnsupportedResumeFormat("Please upload a PDF, DOC, DOCX, or TXT file")
    if path.stat().st_size > MAX_RESUME_BYTES:
        raise UnsupportedResumeFormat("File size must be less than 10MB")

    return _read_txt(path).strip()
