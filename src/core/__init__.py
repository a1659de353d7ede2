"""Core domain package for the webdev bots.

Core contains access control, trigger matching, dispatching and response
formatting without any IRC or network-specific code, keeping the command
pipeline portable.
"""
