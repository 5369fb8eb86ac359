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

"""Install and update policy for AVMS.

Modules:

updates : module
    Update policy and per-version offer decisions.

Public API:

UpdatePolicy : class
    Comparator choice and the current-version requirement for update checks.
is_installable : function
    Check a version's minimum OS against a device OS.
should_offer_update : function
    Decide whether a version is an update over the device's current one.

"""

from .updates import UpdatePolicy, is_installable, should_offer_update

__all__ = ["UpdatePolicy", "is_installable", "should_offer_update"]
