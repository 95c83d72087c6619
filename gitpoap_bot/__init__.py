"""GitPOAP GitHub App bot.

Creates GitPOAP claims when pull requests are merged and when privileged
collaborators tag ``@gitpoap-bot`` together with contributors, then replies on
the GitHub thread.
"""
