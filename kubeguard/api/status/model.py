#
# Copyright 2026 Red Hat, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#
"""Models to capture server status."""

import os
import platform
import subprocess

import kubernetes

from api import API_VERSION


class Status:
    """A server's status."""

    @property
    def commit(self):  # pylint: disable=R0201
        """Collect the build number for the server.

        :returns: A build number, or None when it cannot be determined
        """
        commit_info = os.environ.get("KUBEGUARD_BUILD_COMMIT", None)
        if commit_info is None:
            try:
                commit_info = subprocess.run(["git", "describe", "--always"], stdout=subprocess.PIPE)
            except OSError:
                return None
            commit_info = commit_info.stdout.decode("utf-8").strip() or None
        return commit_info

    @property
    def api_version(self):
        """Return the API version."""
        return API_VERSION

    @property
    def python_version(self):
        """Return the Python version."""
        return platform.python_version()

    @property
    def kubernetes_client_version(self):
        """Return the version of the Kubernetes client library."""
        return kubernetes.__version__
