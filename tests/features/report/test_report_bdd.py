"""BDD tests for reporting passes."""

import pytest
from pytest_bdd import scenarios

scenarios("report_pass.feature")

pytestmark = [
    pytest.mark.tier(1),
    pytest.mark.tra("Core.Report.Pass"),
]
