"""
Auth subsystem.

Components:
- callback.py: AuthCallbackResolver (redirect URL -> CallbackOutcome)
- callback_flow.py: single-resolution listener with a time-boxed window
- validation.py: sign-in / sign-up form validation
"""
