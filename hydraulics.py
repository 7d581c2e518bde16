# ! 펌프 루프 운전점 모델 — 수리계산 엔진
# * 베르누이 식 기반 시스템 부하(System Load) 곡선, 타원형 펌프 양정 곡선
# * 스칼라와 numpy 배열 입력 모두 지원

import math
from dataclasses import dataclass, fields, asdict

import numpy as np

from constants import (
    G, GC, PSI_FT3_TO_FT_LBF, FT_LBF_S_PER_HP,
    DEFAULT_Z1_FT, DEFAULT_Z2_FT, DEFAULT_A1_FT2, DEFAULT_A2_FT2,
    DEFAULT_P1_PSIA, DEFAULT_P2_PSIA, DEFAULT_NU_FT3_LBM, DEFAULT_KSYS,
)


# ──────────────────────────────────────────────
# ? 예외 클래스
# ──────────────────────────────────────────────

class ValidationError(ValueError):
    """사용자 입력 검증 실패 시 발생하는 예외 (모든 모델 예외의 기반)"""
    pass


class DomainError(ValidationError):
    """비물리적 파라미터 (0 이하 단면적, 0 나눗셈 등)"""
    pass


# ──────────────────────────────────────────────
# ? 파라미터 집합 (불변)
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ParameterSet:
    """
    ! 베르누이 식 파라미터 스냅샷

    * frozen: 필드 단위 변경 불가, 슬라이더 변경 시 새 객체로 교체
    * 생성 시에는 검증하지 않음 → 계산 경계 함수에서 validate() 호출
    """
    z1: float = DEFAULT_Z1_FT          # 입구 높이 (ft)
    z2: float = DEFAULT_Z2_FT          # 출구 높이 (ft)
    A1: float = DEFAULT_A1_FT2         # 입구 단면적 (ft²)
    A2: float = DEFAULT_A2_FT2         # 출구 단면적 (ft²)
    P1: float = DEFAULT_P1_PSIA        # 입구 압력 (psia)
    P2: float = DEFAULT_P2_PSIA        # 출구 압력 (psia)
    nu: float = DEFAULT_NU_FT3_LBM     # 비체적 (ft³/lbm)
    ksys: float = DEFAULT_KSYS         # 시스템 손실 계수 (lbf·s²/lbm·ft⁵)
    g: float = G                       # 중력가속도 (ft/s²)
    gc: float = GC                     # 중력 환산 상수 (ft·lbm/lbf·s²)

    @classmethod
    def default(cls) -> "ParameterSet":
        return cls()

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def as_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> "ParameterSet":
        """
        ! 파라미터 물리적 타당성 검증

        * 모든 값은 유한한 실수
        * A1, A2, nu > 0 (나눗셈에 사용)
        * gc ≠ 0
        """
        for name, value in self.as_dict().items():
            if not math.isfinite(value):
                raise DomainError(
                    f"파라미터 {name}는 유한한 실수여야 합니다. (입력값: {value})"
                )
        check_areas(self.A1, self.A2)
        if self.nu <= 0:
            raise DomainError(f"비체적 nu는 양수여야 합니다. (입력값: {self.nu})")
        if self.gc == 0:
            raise DomainError("중력 환산 상수 gc는 0이 될 수 없습니다.")
        return self


def check_areas(A1: float, A2: float) -> None:
    """단면적 검증: 0 또는 음수 → DomainError"""
    if A1 <= 0:
        raise DomainError(f"입구 단면적 A1은 양수여야 합니다. (입력값: {A1} ft²)")
    if A2 <= 0:
        raise DomainError(f"출구 단면적 A2는 양수여야 합니다. (입력값: {A2} ft²)")


def _as_output(value):
    """0차원 배열 → float, 그 외 배열은 그대로"""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return float(arr)
    return arr


# ──────────────────────────────────────────────
# ? 유량 → 유속 변환
# ──────────────────────────────────────────────
def velocity_from_flow(Vdot, area: float):
    """
    v = V̇ / A
    Vdot : 체적 유량 (ft³/s)
    area : 단면적 (ft²)
    반환 : 유속 (ft/s)
    """
    if area <= 0:
        raise DomainError(f"단면적은 양수여야 합니다. (입력값: {area} ft²)")
    return _as_output(np.asarray(Vdot, dtype=float) / area)


# ──────────────────────────────────────────────
# ? 시스템 부하 곡선의 분해 항
#   SL(V̇) = k·V̇² + dpewf
# ──────────────────────────────────────────────
def flow_independent_head(params: ParameterSet) -> float:
    """
    dpewf = (z2 - z1)·g/gc + (P2 - P1)·ν·144

    * 유량과 무관한 위치 에너지 + 유동일(flow work) 항
    """
    return ((params.z2 - params.z1) * params.g / params.gc
            + (params.P2 - params.P1) * params.nu * PSI_FT3_TO_FT_LBF)


def flow_squared_coefficient(params: ParameterSet) -> float:
    """
    k = (1/A2² - 1/A1²)/(2gc) + ksys

    * 운동 에너지 변화 + 시스템 손실의 V̇² 계수
    """
    check_areas(params.A1, params.A2)
    return ((1.0 / params.A2 ** 2 - 1.0 / params.A1 ** 2) / (2.0 * params.gc)
            + params.ksys)


# ──────────────────────────────────────────────
# ? 시스템 부하 양정 (System Load Head)
# ──────────────────────────────────────────────
def system_load_head(Vdot, params: ParameterSet):
    """
    ! 베르누이 식으로 유량별 요구 양정 계산

    SL = (v2² - v1²)/(2gc) + (z2 - z1)·g/gc + (P2 - P1)·ν·144 + ksys·V̇²

    Vdot   : 체적 유량 (ft³/s), 스칼라 또는 배열
    params : ParameterSet
    반환   : 요구 양정 (ft·lbf/lbm)
    """
    check_areas(params.A1, params.A2)
    q = np.asarray(Vdot, dtype=float)
    v2 = velocity_from_flow(q, params.A2)
    v1 = velocity_from_flow(q, params.A1)
    head = ((v2 ** 2 - v1 ** 2) / (2.0 * params.gc)
            + (params.z2 - params.z1) * params.g / params.gc
            + (params.P2 - params.P1) * params.nu * PSI_FT3_TO_FT_LBF
            + params.ksys * q ** 2)
    return _as_output(head)


# ──────────────────────────────────────────────
# ? 펌프 양정 (타원형 P-Q 곡선)
# ──────────────────────────────────────────────
def pump_head(Vdot, HpMax: float, VdotMax: float):
    """
    ! 타원 근사 펌프 곡선

    Hp = HpMax × √(1 - (V̇/V̇max)²)

    * |V̇| > V̇max 이면 근호 안이 음수 → 예외 대신 NaN 반환
      (곡선 전체 계산을 중단하지 않고 구간 밖 샘플만 표시)

    HpMax   : 체절 양정 (ft·lbf/lbm)
    VdotMax : 양정 0이 되는 최대 유량 (ft³/s)
    """
    if VdotMax <= 0:
        raise DomainError(f"펌프 최대 유량은 양수여야 합니다. (입력값: {VdotMax} ft³/s)")
    q = np.asarray(Vdot, dtype=float)
    radicand = 1.0 - (q / VdotMax) ** 2
    with np.errstate(invalid="ignore"):
        head = HpMax * np.sqrt(radicand)
    return _as_output(head)


def hydraulic_power_hp(Vdot: float, head: float, nu: float) -> float:
    """
    수동력 (hp): ṁ = V̇/ν (lbm/s), W = ṁ × Hp (ft·lbf/s), hp = W / 550
    """
    if nu <= 0:
        raise DomainError(f"비체적 nu는 양수여야 합니다. (입력값: {nu})")
    return Vdot / nu * head / FT_LBF_S_PER_HP
