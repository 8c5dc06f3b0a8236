import io
import logging
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch
from reportlab.lib import colors
from django.conf import settings

logger = logging.getLogger(__name__)

BORDER_COLOR = colors.HexColor("#B8860B")
MUTED_TEXT = colors.HexColor("#6b7280")


def render_certificate_pdf(certificate):
    """Render a one-page landscape certificate and return the PDF bytes."""
    buffer = io.BytesIO()
    p = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    p.setTitle(f"Certificate {certificate.certificate_id}")

    # =====================================================================
    #  FRAME
    # =====================================================================
    p.setStrokeColor(BORDER_COLOR)
    p.setLineWidth(4)
    p.rect(0.4 * inch, 0.4 * inch, width - 0.8 * inch, height - 0.8 * inch)
    p.setLineWidth(1)
    p.rect(0.55 * inch, 0.55 * inch, width - 1.1 * inch, height - 1.1 * inch)

    # =====================================================================
    #  HEADING
    # =====================================================================
    center_x = width / 2
    p.setFillColor(colors.black)
    p.setFont("Helvetica-Bold", 34)
    p.drawCentredString(center_x, height - 1.6 * inch, "Certificate of Completion")

    p.setFont("Helvetica", 14)
    p.setFillColor(MUTED_TEXT)
    p.drawCentredString(center_x, height - 2.1 * inch, settings.CERTIFICATE_ISSUER_NAME)

    # =====================================================================
    #  RECIPIENT & COURSE
    # =====================================================================
    p.setFillColor(colors.black)
    p.setFont("Helvetica", 14)
    p.drawCentredString(center_x, height - 2.9 * inch, "This is to certify that")

    p.setFont("Helvetica-Bold", 30)
    p.drawCentredString(center_x, height - 3.6 * inch, certificate.student_name.upper())

    p.setFont("Helvetica", 14)
    p.drawCentredString(center_x, height - 4.2 * inch, "has successfully completed the course")

    p.setFont("Helvetica-Bold", 20)
    p.drawCentredString(center_x, height - 4.8 * inch, certificate.course_name)

    if certificate.instructor_name:
        p.setFont("Helvetica", 12)
        p.drawCentredString(center_x, height - 5.25 * inch, f"Instructor: {certificate.instructor_name}")

    # =====================================================================
    #  FOOTER: date, number, verification link
    # =====================================================================
    p.setFont("Helvetica", 11)
    p.drawString(1 * inch, 1.2 * inch, f"Issued: {certificate.issue_date.strftime('%B %d, %Y')}")
    p.drawRightString(width - 1 * inch, 1.2 * inch, f"Certificate No: {certificate.certificate_id}")

    p.setFillColor(MUTED_TEXT)
    p.setFont("Helvetica", 9)
    p.drawCentredString(center_x, 0.8 * inch, f"Verify at {certificate.verification_url}")

    p.showPage()
    p.save()

    buffer.seek(0)
    logger.info(f"Rendered PDF for certificate {certificate.certificate_id}")
    return buffer.getvalue()
