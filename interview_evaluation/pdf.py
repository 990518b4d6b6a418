from __future__ import annotations  # Styled PDF rendering for live interview evaluations

import os
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .models import Decision, Evaluation, QuestionScore

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background

DECISION_COLORS = {
    Decision.SELECTED: (46, 160, 67),
    Decision.WAITLISTED: (219, 155, 20),
    Decision.REJECTED: (207, 34, 46),
}


def _format_datetime(value: Optional[datetime]) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


class EvaluationPDF(FPDF):  # PDF with banner header and paginated footer
    def __init__(self, *args, accent: Tuple[int, int, int] = ACCENT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Interview Evaluation"
        self.font_regular = "Helvetica"
        self.font_bold = "Helvetica"
        self.supports_unicode = False

    def use_unicode_fonts(self) -> None:  # Switch to DejaVu when the system ships it
        if not (os.path.exists(DEJAVU_SANS) and os.path.exists(DEJAVU_SANS_BOLD)):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self.font_regular = "DejaVu"
        self.font_bold = "DejaVu"
        self.supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for latin-1 core fonts
        value = "" if text is None else str(text)
        if self.supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("…", "...")
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    @property
    def bullet(self) -> str:
        return "•" if self.supports_unicode else "-"

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_font(self.font_bold, "B", 16)
            banner = 24
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, banner, style="F")
            self.set_text_color(255, 255, 255)
            self.set_xy(self.l_margin, 8)
            self.multi_cell(usable, 8, self.prepare_text(self.header_title))
            self.set_text_color(*TEXT)
            self.set_y(banner + 4)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self.font_bold, "B", 12)
            self.multi_cell(usable, 6, self.prepare_text(self.header_title))
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self.font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: EvaluationPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 13)
    pdf.cell(0, 9, pdf.prepare_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: EvaluationPDF, rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.cell(col, line, pdf.prepare_text(left[0]), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, pdf.prepare_text(right[0]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf.font_bold, "B", 11)
        pdf.cell(col, line, pdf.prepare_text(left[1]), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, pdf.prepare_text(right[1]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _score_banner(pdf: EvaluationPDF, evaluation: Evaluation) -> None:  # Overall score and decision strip
    width = _effective_width(pdf)
    top = pdf.get_y()
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    pdf.rect(pdf.l_margin, top, width, 18, style="F")
    pdf.set_xy(pdf.l_margin + 6, top + 5)
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf.font_bold, "B", 16)
    pdf.cell(width / 2 - 6, 8, f"{evaluation.overall_score}/100")
    pdf.set_text_color(*DECISION_COLORS.get(evaluation.decision, TEXT))
    pdf.cell(width / 2 - 6, 8, evaluation.decision.value, align="R")
    pdf.set_text_color(*TEXT)
    pdf.set_y(top + 22)


def _bullet_list(pdf: EvaluationPDF, items: Sequence[str], empty: str) -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_regular, "", 11)
    if not items:
        pdf.set_text_color(*MUTED)
        pdf.multi_cell(_effective_width(pdf), 6, pdf.prepare_text(empty))
        pdf.set_text_color(*TEXT)
        pdf.ln(2)
        return
    pdf.set_text_color(*TEXT)
    for item in items:
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(_effective_width(pdf), 6, pdf.prepare_text(f"{pdf.bullet} {item}"))
    pdf.ln(2)


def _render_question_row(pdf: EvaluationPDF, number: int, entry: QuestionScore) -> None:  # One scored Q/A block
    width = _effective_width(pdf)
    line = 5.5
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.multi_cell(width, line, pdf.prepare_text(f"Q{number}: {entry.question.strip()}  ({entry.score}/10)"))
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(60, 60, 60)
    pdf.set_font(pdf.font_regular, "", 10)
    pdf.multi_cell(width, line, pdf.prepare_text(f"A: {entry.answer.strip()}"))
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf.font_regular, "", 9)
    pdf.multi_cell(width, line, pdf.prepare_text(f"Feedback: {entry.feedback.strip()}"))
    y = pdf.get_y() + 1
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    pdf.line(pdf.l_margin, y, pdf.l_margin + width, y)
    pdf.set_y(y + 3)
    pdf.set_text_color(*TEXT)


def generate_evaluation_pdf(
    evaluation: Evaluation,
    *,
    company: Optional[str] = None,
    position: Optional[str] = None,
    round_type: Optional[str] = None,
) -> bytes:  # Build PDF payload for an evaluation
    pdf = EvaluationPDF()
    pdf.use_unicode_fonts()
    pdf.alias_nb_pages()
    title_parts = [part for part in (position, company) if part]
    pdf.header_title = " - ".join(title_parts + ["Interview Evaluation"])
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    _section_title(pdf, "Overview")
    _meta_block(
        pdf,
        [
            ("Session ID", evaluation.session_id),
            ("Candidate", evaluation.user_id),
            ("Round", round_type or "-"),
            ("Evaluated", _format_datetime(evaluation.created_at)),
        ],
    )
    _score_banner(pdf, evaluation)

    _section_title(pdf, "Summary")
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_regular, "", 11)
    pdf.multi_cell(_effective_width(pdf), 6, pdf.prepare_text(evaluation.detailed_feedback or "-"))
    pdf.ln(2)

    _section_title(pdf, "Strengths")
    _bullet_list(pdf, evaluation.strengths, "No strengths recorded.")
    _section_title(pdf, "Weaknesses")
    _bullet_list(pdf, evaluation.weaknesses, "No weaknesses recorded.")
    _section_title(pdf, "Improvements")
    _bullet_list(pdf, evaluation.improvements, "No improvement suggestions recorded.")

    _section_title(pdf, "Question Scores")
    if not evaluation.question_scores:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.multi_cell(_effective_width(pdf), 6, "No per-question scores recorded for this session.")
        pdf.set_text_color(*TEXT)
    for number, entry in enumerate(evaluation.question_scores, start=1):
        _render_question_row(pdf, number, entry)

    return bytes(pdf.output())


__all__ = ["EvaluationPDF", "generate_evaluation_pdf"]
