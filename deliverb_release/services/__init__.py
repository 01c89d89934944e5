# SPDX-License-Identifier: MIT
"""Application services for the release tool.

Services implement the release logic (version arithmetic, file patching,
working tree checks), coordinating between core/, platform/ and git/.
"""
