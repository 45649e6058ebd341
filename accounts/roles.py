# accounts/roles.py
"""
Client-side roles and the static role -> URL prefix table.

The backend speaks in its own role names (JOB_SEEKER, ROLE_EMPLOYER, ...);
everything on this side of the wire uses the three lower-case roles below.
"""

JOB_SEEKER = 'job_seeker'
EMPLOYER = 'employer'
ADMIN = 'admin'

ROLES = (JOB_SEEKER, EMPLOYER, ADMIN)

ROLE_LABELS = {
    JOB_SEEKER: 'Job Seeker',
    EMPLOYER: 'Employer',
    ADMIN: 'Administrator',
}

ROLE_PERMISSIONS = {
    ADMIN: ('*',),
    EMPLOYER: ('manage_jobs', 'view_applications', 'manage_company'),
    JOB_SEEKER: ('apply_jobs', 'manage_profile', 'manage_cv'),
}

ROLE_PREFIXES = {
    EMPLOYER: '/employer',
    JOB_SEEKER: '/job-seeker',
    ADMIN: '/admin',
}

PUBLIC_PATH = '/'

_BACKEND_ROLES = {
    'ADMIN': ADMIN,
    'EMPLOYER': EMPLOYER,
    'JOB_SEEKER': JOB_SEEKER,
    'JOBSEEKER': JOB_SEEKER,
    'USER': JOB_SEEKER,
    'CUSTOMER': JOB_SEEKER,
}


def has_permission(role, permission):
    granted = ROLE_PERMISSIONS.get(role, ())
    return '*' in granted or permission in granted


def map_backend_role(value):
    """
    Normalize whatever the backend sends as a role into a client role.

    Accepts a plain string ("EMPLOYER", "ROLE_ADMIN"), a list of authorities
    (first one wins) or an object with a name/role/authority key. Unknown
    strings are passed through lower-cased.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get('name') or value.get('role') or value.get('authority')
    if not value:
        return None
    name = str(value).strip().upper()
    if name.startswith('ROLE_'):
        name = name[len('ROLE_'):]
    return _BACKEND_ROLES.get(name, name.lower())


def _normalize(role):
    return role.strip().lower() if isinstance(role, str) else role


def role_prefix(role):
    return ROLE_PREFIXES.get(_normalize(role))


def role_redirect_path(role, target):
    """
    "<prefix>/<target>/" for a known role, the public path otherwise.
    Employers keep their profile under company-profile.
    """
    role = _normalize(role)
    prefix = role_prefix(role)
    if prefix is None:
        return PUBLIC_PATH
    target = (target or '').strip('/')
    if role == EMPLOYER and target == 'profile':
        target = 'company-profile'
    if not target:
        return f"{prefix}/"
    return f"{prefix}/{target}/"


def dashboard_route(role):
    prefix = role_prefix(role) or ROLE_PREFIXES[JOB_SEEKER]
    return f"{prefix}/dashboard/"
