"""
PDF processing utilities.
"""
import io

from pdfminer.high_level import extract_text
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from utils.logger import get_logger
from utils.text_utils import escape_xml_text, format_date_range, format_year_month

logger = get_logger(__name__)

HEADING_COLOR = '#2c3e50'
MUTED_COLOR = '#7f8c8d'


def read_pdf(source):
    """
    Read text content from a PDF.

    Args:
        source (str | bytes): Path to the PDF file, or its raw bytes

    Returns:
        str: Extracted text content, or None if an error occurred
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            return extract_text(io.BytesIO(source))
        return extract_text(source)
    except FileNotFoundError:
        logger.error("The file '%s' was not found.", source)
        return None
    except Exception:
        logger.exception("An error occurred while reading the PDF")
        return None


def _resume_styles():
    styles = getSampleStyleSheet()
    return {
        'name': ParagraphStyle(
            'ResumeName', parent=styles['Heading1'], fontName='Times-Bold',
            fontSize=20, leading=24, alignment=TA_CENTER, textColor=HEADING_COLOR, spaceAfter=4
        ),
        'contact': ParagraphStyle(
            'ResumeContact', parent=styles['Normal'], fontName='Times-Roman',
            fontSize=9, leading=11, alignment=TA_CENTER, textColor='#555555'
        ),
        'section': ParagraphStyle(
            'ResumeSection', parent=styles['Heading2'], fontName='Times-Bold',
            fontSize=12, leading=14, textColor=HEADING_COLOR, spaceBefore=10, spaceAfter=2
        ),
        'item_title': ParagraphStyle(
            'ResumeItemTitle', parent=styles['Normal'], fontName='Times-Bold',
            fontSize=11, leading=13, textColor=HEADING_COLOR
        ),
        'item_subtitle': ParagraphStyle(
            'ResumeItemSubtitle', parent=styles['Normal'], fontName='Times-Italic',
            fontSize=10, leading=12, textColor=MUTED_COLOR
        ),
        'body': ParagraphStyle(
            'ResumeBody', parent=styles['Normal'], fontName='Times-Roman',
            fontSize=10, leading=13, alignment=TA_LEFT
        ),
        'bullet': ParagraphStyle(
            'ResumeBullet', parent=styles['Normal'], fontName='Times-Roman',
            fontSize=10, leading=13, leftIndent=12, bulletIndent=2
        ),
    }


def _section(elements, title, styles):
    elements.append(Paragraph(escape_xml_text(title.upper()), styles['section']))
    elements.append(HRFlowable(width='100%', thickness=0.5, color='#bdc3c7', spaceAfter=6))


def _item_header(title, subtitle, dates, styles):
    heading = f"<b>{escape_xml_text(title)}</b>"
    if dates:
        heading += f"  <font size=9 color='{MUTED_COLOR}'>{escape_xml_text(dates)}</font>"
    parts = [Paragraph(heading, styles['item_title'])]
    if subtitle:
        parts.append(Paragraph(escape_xml_text(subtitle), styles['item_subtitle']))
    return parts


def _description(text, styles):
    flowables = []
    for line in (text or '').split('\n'):
        line = line.strip().lstrip('•-* ').strip()
        if line:
            flowables.append(Paragraph(escape_xml_text(line), styles['bullet'], bulletText='•'))
    return flowables


def build_resume_pdf(resume, title):
    """
    Render filtered resume data into a letter-size PDF.

    Args:
        resume (dict): Output of ``filter_resume_data`` (profile, sections, flags)
        title (str): Document title

    Returns:
        bytes: PDF document
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=title,
                            rightMargin=0.5 * inch, leftMargin=0.5 * inch,
                            topMargin=0.5 * inch, bottomMargin=0.5 * inch)
    styles = _resume_styles()
    elements = []

    profile = resume.get('profile')
    if profile and resume.get('include_personal_info'):
        name = resume.get('full_name') or title
        elements.append(Paragraph(escape_xml_text(name), styles['name']))
        contact = ' | '.join(escape_xml_text(item) for item in resume.get('contact_items', []))
        if contact:
            elements.append(Paragraph(contact, styles['contact']))
        elements.append(Spacer(1, 6))

    if profile and resume.get('include_summary') and profile.get('professionalSummary'):
        _section(elements, 'Professional Summary', styles)
        elements.append(Paragraph(escape_xml_text(profile['professionalSummary']), styles['body']))

    if resume.get('work_experiences'):
        _section(elements, 'Professional Experience', styles)
        for experience in resume['work_experiences']:
            subtitle = experience['company']
            if experience.get('location'):
                subtitle += f", {experience['location']}"
            dates = format_date_range(experience.get('startDate'), experience.get('endDate'),
                                      experience.get('isCurrent'))
            block = _item_header(experience['jobTitle'], subtitle, dates, styles)
            block.extend(_description(experience.get('description'), styles))
            if experience.get('technologies'):
                block.append(Paragraph(
                    f"<i>Technologies: {escape_xml_text(experience['technologies'])}</i>", styles['body']))
            block.append(Spacer(1, 6))
            elements.append(KeepTogether(block))

    if resume.get('education'):
        _section(elements, 'Education', styles)
        for edu in resume['education']:
            degree = edu['degree']
            if edu.get('fieldOfStudy'):
                degree += f" in {edu['fieldOfStudy']}"
            dates = format_date_range(edu.get('startDate'), edu.get('endDate'))
            block = _item_header(degree, edu['institution'], dates, styles)
            details = [f"GPA: {edu['gpa']}" if edu.get('gpa') else None, edu.get('honors')]
            details = [detail for detail in details if detail]
            if details:
                block.append(Paragraph(escape_xml_text(' | '.join(details)), styles['body']))
            if edu.get('relevantCoursework'):
                block.append(Paragraph(
                    f"Relevant Coursework: {escape_xml_text(edu['relevantCoursework'])}", styles['body']))
            block.append(Spacer(1, 6))
            elements.append(KeepTogether(block))

    if resume.get('skills_by_category'):
        _section(elements, 'Technical Skills', styles)
        for category, names in resume['skills_by_category'].items():
            elements.append(Paragraph(
                f"<b>{escape_xml_text(category.capitalize())}:</b> {escape_xml_text(', '.join(names))}",
                styles['body']))

    if resume.get('projects'):
        _section(elements, 'Notable Projects', styles)
        for project in resume['projects']:
            dates = format_date_range(project.get('startDate'), project.get('endDate'),
                                      project.get('isOngoing'))
            block = _item_header(project['title'], None, dates, styles)
            block.extend(_description(project.get('description'), styles))
            if project.get('technologies'):
                block.append(Paragraph(
                    f"<i>Technologies: {escape_xml_text(project['technologies'])}</i>", styles['body']))
            block.append(Spacer(1, 6))
            elements.append(KeepTogether(block))

    if resume.get('certifications'):
        _section(elements, 'Certifications', styles)
        for cert in resume['certifications']:
            dates = format_year_month(cert.get('issueDate'))
            if cert.get('expirationDate'):
                dates = f"{dates} - {format_year_month(cert['expirationDate'])}"
            elements.extend(_item_header(cert['name'], cert['issuingOrganization'], dates, styles))
            elements.append(Spacer(1, 4))

    if resume.get('achievements'):
        _section(elements, 'Awards & Achievements', styles)
        for achievement in resume['achievements']:
            block = _item_header(achievement['title'], achievement.get('organization'),
                                 format_year_month(achievement.get('date')), styles)
            if achievement.get('description'):
                block.append(Paragraph(escape_xml_text(achievement['description']), styles['body']))
            block.append(Spacer(1, 4))
            elements.append(KeepTogether(block))

    if resume.get('references'):
        _section(elements, 'References', styles)
        for reference in resume['references']:
            subtitle = ', '.join(part for part in (reference.get('title'), reference.get('company')) if part)
            block = _item_header(reference['name'], subtitle, None, styles)
            contact = ' | '.join(part for part in (reference.get('email'), reference.get('phone')) if part)
            if contact:
                block.append(Paragraph(escape_xml_text(contact), styles['body']))
            elements.append(KeepTogether(block))

    if not elements:
        elements.append(Paragraph(escape_xml_text(title), styles['name']))

    doc.build(elements)
    return buffer.getvalue()


def build_cover_letter_pdf(content, title):
    """
    Render cover letter text into a PDF, one Paragraph per blank-line separated block.

    Args:
        content (str): Cover letter text
        title (str): Document title

    Returns:
        bytes: PDF document
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=title,
                            rightMargin=72, leftMargin=72,
                            topMargin=72, bottomMargin=18)

    styles = getSampleStyleSheet()
    normal_style = ParagraphStyle(
        'CoverLetterNormal',
        parent=styles['Normal'],
        fontSize=11,
        leading=14,
        alignment=TA_LEFT,
        spaceAfter=12
    )

    elements = []
    for para in content.split('\n\n'):
        para_clean = para.replace('\n', ' ').strip()
        if para_clean:
            elements.append(Paragraph(escape_xml_text(para_clean), normal_style))
            elements.append(Spacer(1, 6))

    doc.build(elements)
    return buffer.getvalue()
