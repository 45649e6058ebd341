# employers/forms.py
import datetime

from django import forms
from django.core.exceptions import ValidationError

from api.dto import APPLICATION_STATUSES


class JobPostForm(forms.Form):
    TYPE_CHOICES = (
        ('Full-time', 'Full-time'),
        ('Part-time', 'Part-time'),
        ('Contract', 'Contract'),
    )
    EXPERIENCE_CHOICES = (
        ('', 'Any'),
        ('Entry', 'Entry level'),
        ('Mid', 'Mid level'),
        ('Senior', 'Senior'),
        ('Lead', 'Lead'),
    )
    title = forms.CharField(max_length=200)
    location = forms.CharField(required=False, max_length=150)
    type = forms.ChoiceField(choices=TYPE_CHOICES, initial='Full-time')
    deadline = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    experience = forms.ChoiceField(required=False, choices=EXPERIENCE_CHOICES)
    salary = forms.CharField(required=False, max_length=100, help_text="e.g. $60k - $80k")
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 8}))
    requirements = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 5}))

    def clean_deadline(self):
        d = self.cleaned_data.get('deadline')
        if d and d < datetime.date.today():
            raise ValidationError("Deadline cannot be in the past.")
        return d

    @classmethod
    def initial_from(cls, job):
        """Backend job JSON -> initial form values for the edit page."""
        job = job or {}
        deadline = job.get('deadline') or ''
        return {
            'title': job.get('title') or '',
            'location': job.get('location') or '',
            'type': job.get('type') or job.get('jobType') or 'Full-time',
            'deadline': deadline[:10] if deadline else None,
            'experience': job.get('experienceLevel') or '',
            'salary': job.get('salaryRange') or job.get('salary') or '',
            'description': job.get('description') or '',
            'requirements': job.get('requirements') or '',
        }

    def to_payload(self):
        data = self.cleaned_data
        deadline = data.get('deadline')
        return {
            'title': data['title'],
            'location': data.get('location') or '',
            'type': data['type'],
            'salaryRange': data.get('salary') or '',
            'experienceLevel': data.get('experience') or '',
            'description': data.get('description') or '',
            'requirements': data.get('requirements') or '',
            'deadline': f"{deadline.isoformat()}T23:59:59" if deadline else None,
        }


class CompanyProfileForm(forms.Form):
    SIZE_CHOICES = (
        ('', '-'),
        ('1-10', '1-10'),
        ('11-50', '11-50'),
        ('51-200', '51-200'),
        ('201-500', '201-500'),
        ('500+', '500+'),
    )
    company_name = forms.CharField(max_length=200)
    website = forms.URLField(required=False)
    location = forms.CharField(required=False, max_length=150)
    industry = forms.CharField(required=False, max_length=100)
    company_size = forms.ChoiceField(required=False, choices=SIZE_CHOICES)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 5}))

    FIELD_MAP = {
        'company_name': 'companyName',
        'website': 'website',
        'location': 'location',
        'industry': 'industry',
        'company_size': 'companySize',
        'description': 'description',
    }

    @classmethod
    def initial_from(cls, profile):
        profile = profile or {}
        return {field: profile.get(key) or '' for field, key in cls.FIELD_MAP.items()}

    def to_payload(self):
        return {key: self.cleaned_data.get(field) for field, key in self.FIELD_MAP.items()}


class VerificationRequestForm(forms.Form):
    DOCUMENT_CHOICES = (
        ('BUSINESS_REGISTRATION', 'Business registration'),
        ('TAX_CERTIFICATE', 'Tax certificate'),
        ('OTHER', 'Other'),
    )
    document_type = forms.ChoiceField(choices=DOCUMENT_CHOICES)
    registration_number = forms.CharField(required=False, max_length=100)
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}), max_length=1000)

    def to_payload(self):
        return {
            'documentType': self.cleaned_data['document_type'],
            'registrationNumber': self.cleaned_data.get('registration_number') or None,
            'notes': self.cleaned_data.get('notes') or None,
        }


class ApplicationStatusForm(forms.Form):
    status = forms.CharField(max_length=20)

    def clean_status(self):
        status = self.cleaned_data['status'].strip().upper()
        if status not in APPLICATION_STATUSES:
            raise ValidationError("Unknown application status.")
        return status


class ApplicationNoteForm(forms.Form):
    note = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}), max_length=2000)
