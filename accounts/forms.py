# accounts/forms.py
from django import forms
from django.core.validators import RegexValidator

EMAIL_PATTERN = r'^\S+@\S+\.\S+$'

email_validator = RegexValidator(EMAIL_PATTERN, "Please enter a valid email address.")


class LoginForm(forms.Form):
    email = forms.CharField(
        max_length=254,
        validators=[email_validator],
        error_messages={'required': "Email is required."},
        widget=forms.EmailInput(attrs={'autocomplete': 'email'}),
    )
    password = forms.CharField(
        error_messages={'required': "Password is required."},
        widget=forms.PasswordInput(attrs={'autocomplete': 'current-password'}),
        strip=False,
    )
    remember_me = forms.BooleanField(required=False)

    def clean_email(self):
        return self.cleaned_data['email'].strip()


class RegisterForm(forms.Form):
    ROLE_CHOICES = (
        ('JOB_SEEKER', 'Job Seeker'),
        ('EMPLOYER', 'Employer'),
    )
    role = forms.ChoiceField(choices=ROLE_CHOICES, initial='JOB_SEEKER', widget=forms.RadioSelect)
    email = forms.CharField(max_length=254, validators=[email_validator], widget=forms.EmailInput)
    password = forms.CharField(widget=forms.PasswordInput, strip=False)
    confirm_password = forms.CharField(widget=forms.PasswordInput, strip=False)
    full_name = forms.CharField(required=False, max_length=150)
    company_name = forms.CharField(required=False, max_length=200)
    phone = forms.CharField(required=False, max_length=30)
    location = forms.CharField(required=False, max_length=150)
    agree_terms = forms.BooleanField(
        error_messages={'required': "You must accept the terms and conditions."},
    )

    def clean_password(self):
        password = self.cleaned_data.get('password') or ''
        if len(password) < 6:
            raise forms.ValidationError("Password must be at least 6 characters.")
        return password

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get('password')
        confirm = cleaned.get('confirm_password')
        if password and confirm is not None and password != confirm:
            self.add_error('confirm_password', "Passwords do not match.")

        role = cleaned.get('role')
        if role == 'JOB_SEEKER' and not (cleaned.get('full_name') or '').strip():
            self.add_error('full_name', "Full name is required.")
        if role == 'EMPLOYER' and not (cleaned.get('company_name') or '').strip():
            self.add_error('company_name', "Company name is required.")
        return cleaned

    def to_payload(self):
        data = self.cleaned_data
        return {
            'email': data['email'].strip(),
            'password': data['password'],
            'role': data['role'],
            'fullName': data.get('full_name') or None,
            'companyName': data.get('company_name') or None,
            'phone': data.get('phone') or None,
            'location': data.get('location') or None,
        }


class ForgotPasswordForm(forms.Form):
    email = forms.CharField(max_length=254, validators=[email_validator], widget=forms.EmailInput)


class ChangePasswordForm(forms.Form):
    """
    Shared by the job-seeker and employer settings pages; they differ only in
    the minimum length they ask for.
    """
    current_password = forms.CharField(widget=forms.PasswordInput, strip=False)
    new_password = forms.CharField(widget=forms.PasswordInput, strip=False)
    confirm_password = forms.CharField(widget=forms.PasswordInput, strip=False)

    def __init__(self, *args, min_length=6, **kwargs):
        self.min_length = min_length
        super().__init__(*args, **kwargs)

    def clean_new_password(self):
        password = self.cleaned_data.get('new_password') or ''
        if len(password) < self.min_length:
            raise forms.ValidationError(f"Password must be at least {self.min_length} characters.")
        return password

    def clean(self):
        cleaned = super().clean()
        new = cleaned.get('new_password')
        confirm = cleaned.get('confirm_password')
        if new and confirm is not None and new != confirm:
            self.add_error('confirm_password', "Passwords do not match.")
        return cleaned
