# api/dto.py
"""
Plain records mirroring backend resources. They carry no rules of their own;
`raw` keeps the original payload for fields a template needs but the record
does not name.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _first(data, *keys, default=None):
    for key in keys:
        value = data.get(key)
        if value not in (None, ''):
            return value
    return default


def _nested(data, key, attr):
    value = data.get(key)
    if isinstance(value, dict):
        return value.get(attr)
    return None


@dataclass
class User:
    id: Optional[int] = None
    email: str = ''
    name: str = ''
    role: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data):
        data = data or {}
        active = _first(data, 'isActive', 'active', 'enabled', default=True)
        return cls(
            id=data.get('id'),
            email=data.get('email') or '',
            name=_first(data, 'fullName', 'name', 'companyName', 'email', default=''),
            role=data.get('role'),
            is_active=bool(active),
            created_at=data.get('createdAt'),
            raw=data,
        )


@dataclass
class Job:
    id: Optional[int] = None
    title: str = ''
    description: str = ''
    location: str = ''
    type: str = ''
    salary: str = ''
    status: str = ''
    employer_id: Optional[int] = None
    employer_name: str = ''
    employer_email: str = ''
    deadline: Optional[str] = None
    applicant_count: int = 0
    created_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data):
        data = data or {}
        return cls(
            id=data.get('id'),
            title=data.get('title') or '',
            description=data.get('description') or '',
            location=data.get('location') or '',
            type=_first(data, 'jobType', 'type', default=''),
            salary=_first(data, 'salaryRange', 'salary', default=''),
            status=data.get('status') or '',
            employer_id=_first(data, 'employerId', default=_nested(data, 'employer', 'id')),
            employer_name=_first(data, 'employerName', 'company',
                                 default=_nested(data, 'employer', 'companyName') or ''),
            employer_email=data.get('employerEmail') or '',
            deadline=data.get('deadline'),
            applicant_count=data.get('applicantCount') or 0,
            created_at=data.get('createdAt'),
            raw=data,
        )

    @property
    def is_pending(self):
        return (self.status or '').upper() == 'PENDING'


@dataclass
class Application:
    id: Optional[int] = None
    job_id: Optional[int] = None
    job_title: str = ''
    employer_name: str = ''
    job_seeker_id: Optional[int] = None
    job_seeker_name: str = ''
    job_seeker_email: str = ''
    cv_id: Optional[int] = None
    status: str = ''
    cover_letter: str = ''
    notes: str = ''
    applied_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data):
        data = data or {}
        return cls(
            id=data.get('id'),
            job_id=_first(data, 'jobId', default=_nested(data, 'job', 'id')),
            job_title=_first(data, 'jobTitle', default=_nested(data, 'job', 'title') or ''),
            employer_name=data.get('employerName') or '',
            job_seeker_id=data.get('jobSeekerId'),
            job_seeker_name=data.get('jobSeekerName') or '',
            job_seeker_email=data.get('jobSeekerEmail') or '',
            cv_id=data.get('cvId'),
            status=data.get('status') or '',
            cover_letter=data.get('coverLetter') or '',
            notes=_first(data, 'employerNotes', 'notes', default=''),
            applied_at=_first(data, 'appliedAt', 'createdAt'),
            raw=data,
        )


@dataclass
class CV:
    id: Optional[int] = None
    file_name: str = ''
    file_type: str = ''
    file_size: Optional[int] = None
    title: str = ''
    description: str = ''
    is_default: bool = False
    created_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data):
        data = data or {}
        return cls(
            id=data.get('id'),
            file_name=data.get('fileName') or '',
            file_type=data.get('fileType') or '',
            file_size=data.get('fileSize'),
            title=_first(data, 'title', 'fileName', default=''),
            description=data.get('description') or '',
            is_default=bool(_first(data, 'isDefault', 'default', default=False)),
            created_at=data.get('createdAt'),
            raw=data,
        )


@dataclass
class Employer:
    id: Optional[int] = None
    company_name: str = ''
    company_email: str = ''
    description: str = ''
    website: str = ''
    location: str = ''
    industry: str = ''
    is_approved: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data):
        data = data or {}
        return cls(
            id=data.get('id'),
            company_name=data.get('companyName') or '',
            company_email=_first(data, 'companyEmail', default=_nested(data, 'user', 'email') or ''),
            description=_first(data, 'description', 'companyDescription', default=''),
            website=data.get('website') or '',
            location=data.get('location') or '',
            industry=data.get('industry') or '',
            is_approved=bool(data.get('isApproved')),
            raw=data,
        )


def many(dto_cls, items):
    return [dto_cls.from_json(item) for item in (items or [])]


APPLICATION_STATUSES = ('PENDING', 'REVIEWING', 'SHORTLISTED', 'ACCEPTED', 'REJECTED', 'WITHDRAWN')
JOB_STATUSES = ('PENDING', 'APPROVED', 'REJECTED', 'CLOSED')
