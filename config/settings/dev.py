"""Development settings for EventO.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and printing
email and SMS messages to the console. Do not use these settings in
production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email and SMS backends during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
SMS_BACKEND = 'apps.notifications.sms.ConsoleSMSBackend'
