# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Version registry for AVMS.

This package holds the in-memory store of applications and their uploaded
versions. Nothing here is persisted; a fresh process starts with an empty
registry.

Public API:

- VersionRecord: One uploaded version (immutable apart from released devices)
- Application: An app name and its versions
- VersionRegistry: Upload, lookup, and listing operations

Example:
    Basic usage:

        from appvms.registry import VersionRegistry

        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"v1.0", False)
        print([v.version_id for v in registry.list_versions("PhonePe")])

"""

from .store import Application, VersionRecord, VersionRegistry

__all__ = ["Application", "VersionRecord", "VersionRegistry"]
