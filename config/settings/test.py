"""Settings used by the pytest suite.

Everything external is replaced with an in-process stand-in: an in-memory
SQLite database, the locmem email backend, the in-memory SMS outbox and
eager Celery execution.
"""

import tempfile

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'evento-test-secret-key-not-for-production-use-0123456789'
SIMPLE_JWT['SIGNING_KEY'] = SECRET_KEY  # noqa: F405

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
SMS_BACKEND = 'apps.notifications.sms.LocmemSMSBackend'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}
MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='evento-media-'))  # noqa: F405

STRIPE_SECRET_KEY = 'sk_test_dummy'
STRIPE_WEBHOOK_SECRET = 'whsec_dummy'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
