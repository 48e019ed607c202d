"""
Candidate Intake Catalog

The default section and field catalog used by the intake form, plus the
example submission behind the form's "fill example data" action.
"""

from __future__ import annotations

from typing import Final

from core.disclosure.schema import Field, SchemaCatalog, Section, ValueType


SECTIONS: Final[tuple[Section, ...]] = (
    Section(
        id="personal",
        title="Personal Information",
        description="Identity and contact details.",
    ),
    Section(
        id="professional",
        title="Professional Background",
        description="Current role, experience and education.",
    ),
    Section(
        id="preferences",
        title="Preferences",
        description="Role, location and working arrangement preferences.",
    ),
    Section(
        id="financial_legal",
        title="Financial & Legal",
        description="Compensation expectations and legal declarations.",
    ),
    Section(
        id="meta",
        title="Additional Notes",
        description="Anything else the reviewer should know.",
    ),
)

FIELDS: Final[tuple[Field, ...]] = (
    # Personal
    Field("full_name", "Full Name", "personal"),
    Field("date_of_birth", "Date of Birth", "personal", sensitive=True, value_type=ValueType.DATE),
    Field("id_number", "National ID / Passport Number", "personal", sensitive=True),
    Field("email", "Email", "personal", value_type=ValueType.EMAIL, placeholder="name@example.com"),
    Field("phone", "Phone", "personal", value_type=ValueType.TEL),
    Field("address", "Home Address", "personal", sensitive=True, optional=True, value_type=ValueType.TEXTAREA),
    # Professional
    Field("current_title", "Current Job Title", "professional"),
    Field("current_employer", "Current Employer", "professional"),
    Field("years_experience", "Years of Experience", "professional", value_type=ValueType.NUMBER),
    Field(
        "education_level",
        "Highest Education",
        "professional",
        value_type=ValueType.SELECT,
        options=("High School", "Bachelor", "Master", "Doctorate", "Other"),
    ),
    Field("skills", "Key Skills", "professional", value_type=ValueType.TEXTAREA),
    Field("work_history", "Work History", "professional", optional=True, value_type=ValueType.TEXTAREA),
    # Preferences
    Field("desired_role", "Desired Role", "preferences"),
    Field("preferred_location", "Preferred Location", "preferences"),
    Field(
        "work_mode",
        "Work Mode",
        "preferences",
        value_type=ValueType.SELECT,
        options=("On-site", "Hybrid", "Remote"),
    ),
    Field("available_from", "Available From", "preferences", optional=True, value_type=ValueType.DATE),
    # Financial & Legal
    Field("current_salary", "Current Salary", "financial_legal", sensitive=True, value_type=ValueType.NUMBER),
    Field("expected_salary", "Expected Salary", "financial_legal", sensitive=True, value_type=ValueType.NUMBER),
    Field(
        "work_authorization",
        "Work Authorization",
        "financial_legal",
        value_type=ValueType.SELECT,
        options=("Citizen", "Permanent Resident", "Work Visa", "Requires Sponsorship"),
    ),
    Field(
        "criminal_record",
        "Criminal Record Declaration",
        "financial_legal",
        sensitive=True,
        optional=True,
        value_type=ValueType.TEXTAREA,
    ),
    Field(
        "non_compete",
        "Non-compete or Other Restrictions",
        "financial_legal",
        sensitive=True,
        optional=True,
        value_type=ValueType.TEXTAREA,
    ),
    # Meta
    Field("referral_source", "How Did You Hear About Us", "meta", optional=True),
    Field("additional_notes", "Additional Notes", "meta", optional=True, value_type=ValueType.TEXTAREA),
)

EXAMPLE_DATA: Final[dict[str, str]] = {
    "full_name": "Alex Chen",
    "date_of_birth": "1990-04-12",
    "id_number": "X1234567",
    "email": "alex.chen@example.com",
    "phone": "+1 415 555 0142",
    "address": "221 Market Street\nApt 5B\nSan Francisco, CA 94105",
    "current_title": "Senior Backend Engineer",
    "current_employer": "Northwind Analytics",
    "years_experience": "9",
    "education_level": "Master",
    "skills": "Python, PostgreSQL, distributed systems\nTeam leadership",
    "work_history": (
        "2019-present: Northwind Analytics, Senior Backend Engineer\n"
        "2015-2019: Contoso Labs, Software Engineer"
    ),
    "desired_role": "Staff Engineer",
    "preferred_location": "San Francisco Bay Area",
    "work_mode": "Hybrid",
    "available_from": "2025-01-06",
    "current_salary": "185000",
    "expected_salary": "210000",
    "work_authorization": "Permanent Resident",
    "criminal_record": "None",
    "non_compete": 'Standard 6-month "non-solicit" clause with current employer',
    "referral_source": "Former colleague",
    "additional_notes": "",
}


def create_sample_catalog() -> SchemaCatalog:
    """Create the default candidate intake catalog."""
    return SchemaCatalog(sections=SECTIONS, fields=FIELDS)


def create_sample_submission() -> dict[str, str]:
    """
    Create the example submission used by the form's test-data action.
    Returns a fresh copy on every call.
    """
    return dict(EXAMPLE_DATA)
