import pytest
from pydantic import ValidationError

from src.models.host import HostProfile, OsCodename
from src.models.provisioning import ProvisioningResult, StageResult, StageStatus


@pytest.mark.parametrize("codename, repo", [
    ("focal", "ubuntu2004"),
    ("jammy", "ubuntu2204"),
    ("noble", "ubuntu2404"),
])
def test_codename_selects_cuda_repo(codename, repo):
    assert OsCodename.parse(codename).cuda_repo == repo


@pytest.mark.parametrize("codename", ["bionic", "bookworm", "", "Jammy Jellyfish", "JAMMY"])
def test_unknown_codename_is_rejected(codename):
    assert OsCodename.parse(codename) is None


def _profile(**overrides):
    values = dict(gpu_present=True, gpu_name="RTX", vram_mb=8000, ram_mb=12000, swap_mb=4000,
                  os_codename="noble")
    values.update(overrides)
    return HostProfile(**values)


def test_host_profile_totals_and_repo():
    profile = _profile()

    assert profile.total_memory_mb == 16000
    assert profile.cuda_repo == "ubuntu2404"


def test_host_profile_is_immutable():
    profile = _profile()

    with pytest.raises(ValidationError):
        profile.vram_mb = 1


def test_result_exit_code_and_warnings():
    result = ProvisioningResult(run_id="r1")
    result.stages.append(StageResult(name="verify", status=StageStatus.DEGRADED, warnings=["w"]))

    assert result.exit_code == 1
    result.complete(True)

    assert result.exit_code == 0
    assert result.warnings == ["w"]
    assert result.duration_seconds is not None
