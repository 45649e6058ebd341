# jobs/forms.py
import os

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError


def validate_cv_file(f):
    """PDF/DOC/DOCX only, at most CV_MAX_UPLOAD_SIZE bytes."""
    allowed = getattr(settings, 'CV_ALLOWED_EXTENSIONS', ('.pdf', '.doc', '.docx'))
    max_size = getattr(settings, 'CV_MAX_UPLOAD_SIZE', 5 * 1024 * 1024)
    ext = os.path.splitext(f.name or '')[1].lower()
    if ext not in allowed:
        raise ValidationError("Only PDF, DOC and DOCX files are allowed.")
    if f.size > max_size:
        raise ValidationError(f"File size must be <= {max_size // (1024 * 1024)} MB.")
    return f


class ApplyForm(forms.Form):
    """
    The applicant either picks one of their saved CVs or uploads a new one.
    When both are given the upload wins.
    """
    cv_id = forms.CharField(required=False)   # radio value, converted in clean()
    uploaded_cv = forms.FileField(required=False)
    cover_letter = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 6}), max_length=5000)

    def clean_uploaded_cv(self):
        f = self.cleaned_data.get('uploaded_cv')
        if not f:
            return f
        return validate_cv_file(f)

    def clean(self):
        cleaned = super().clean()
        raw = cleaned.get('cv_id')
        uploaded = cleaned.get('uploaded_cv')

        cv_id = None
        if raw not in (None, '', 'None'):
            try:
                cv_id = int(raw)
            except (ValueError, TypeError):
                raise ValidationError("Selected CV is invalid.")

        if uploaded:
            cv_id = None
        elif not cv_id and 'uploaded_cv' not in self.errors:
            raise ValidationError("Please select a CV or upload a new one.")

        cleaned['cv_id'] = cv_id
        return cleaned


class CVUploadForm(forms.Form):
    file = forms.FileField()

    def clean_file(self):
        return validate_cv_file(self.cleaned_data['file'])


class CVMetadataForm(forms.Form):
    title = forms.CharField(max_length=200)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}), max_length=1000)


class CVBuilderForm(forms.Form):
    first_name = forms.CharField(max_length=100)
    last_name = forms.CharField(max_length=100)
    email = forms.CharField(required=False, max_length=254)
    phone = forms.CharField(required=False, max_length=30)
    title = forms.CharField(required=False, max_length=200, help_text="e.g. Senior Product Designer")
    summary = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 4}))
    skills = forms.CharField(required=False, help_text="Comma separated skills (e.g. Python,SQL,Django)")
    experience = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 5}),
        help_text="One position per line: Role | Company | Period",
    )
    education = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 3}),
        help_text="One entry per line: Degree | School | Year",
    )

    @staticmethod
    def _entries(text, keys):
        entries = []
        for line in (text or '').splitlines():
            parts = [p.strip() for p in line.split('|')]
            if not any(parts):
                continue
            parts += [''] * (len(keys) - len(parts))
            entries.append(dict(zip(keys, parts)))
        return entries

    def clean(self):
        cleaned = super().clean()
        skills_csv = cleaned.get('skills', '')
        cleaned['skill_list'] = [s.strip() for s in skills_csv.split(',') if s.strip()]
        cleaned['experience_list'] = self._entries(cleaned.get('experience'), ('role', 'company', 'period'))
        cleaned['education_list'] = self._entries(cleaned.get('education'), ('degree', 'school', 'year'))
        return cleaned

    def to_payload(self):
        data = self.cleaned_data
        return {
            'firstName': data['first_name'],
            'lastName': data['last_name'],
            'email': data.get('email') or None,
            'phone': data.get('phone') or None,
            'title': data.get('title') or None,
            'summary': data.get('summary') or None,
            'skills': data['skill_list'],
            'experience': data['experience_list'],
            'education': data['education_list'],
        }


class JobSeekerProfileForm(forms.Form):
    full_name = forms.CharField(max_length=150)
    phone = forms.CharField(required=False, max_length=30)
    location = forms.CharField(required=False, max_length=150)
    headline = forms.CharField(required=False, max_length=200)
    bio = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 4}))
    skills = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    experience = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 4}))
    education = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    FIELD_MAP = {
        'full_name': 'fullName',
        'phone': 'phone',
        'location': 'location',
        'headline': 'headline',
        'bio': 'bio',
        'skills': 'skills',
        'experience': 'experience',
        'education': 'education',
    }

    @classmethod
    def initial_from(cls, profile):
        profile = profile or {}
        return {field: profile.get(key) or '' for field, key in cls.FIELD_MAP.items()}

    def to_payload(self):
        return {key: self.cleaned_data.get(field) for field, key in self.FIELD_MAP.items()}


class AccountSettingsForm(forms.Form):
    VISIBILITY_CHOICES = (
        ('public', 'Public'),
        ('private', 'Private'),
    )
    phone = forms.CharField(required=False, max_length=30)
    profile_visibility = forms.ChoiceField(choices=VISIBILITY_CHOICES, initial='public')

    def to_payload(self):
        return {
            'phone': self.cleaned_data.get('phone'),
            'profileVisibility': self.cleaned_data['profile_visibility'],
        }
