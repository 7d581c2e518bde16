# ! 펌프 루프 운전점 모델 — 전역 상수 및 기본 파라미터 정의
# * 모든 모듈이 이 파일을 참조합니다.
# * 단위계: 영국 공학 단위 (ft, ft², psia, ft³/lbm, ft³/s, ft·lbf/lbm)

# ──────────────────────────────────────────────
# ? 단위 환산 상수
# ──────────────────────────────────────────────
G = 32.0                   # 중력가속도 (ft/s²)
GC = 32.0                  # 중력 환산 상수 (ft·lbm/lbf·s²)
PSI_FT3_TO_FT_LBF = 144.0  # psi·ft³/lbm → ft·lbf/lbm (in²/ft²), 절대 단순화 금지
FT_LBF_S_PER_HP = 550.0    # 1 hp = 550 ft·lbf/s

# ──────────────────────────────────────────────
# ? 베르누이 식 기본 파라미터
#   Hp = (v2² - v1²)/(2gc) + (z2 - z1)g/gc + (P2 - P1)ν·144 + ksys·V̇²
# ──────────────────────────────────────────────
DEFAULT_Z2_FT = 0.0          # 출구 높이 (ft)
DEFAULT_A2_FT2 = 0.25        # 출구 단면적 (ft²)
DEFAULT_P2_PSIA = 30.0       # 출구 압력 (psia)
DEFAULT_NU_FT3_LBM = 0.017   # 비체적 (ft³/lbm)
DEFAULT_KSYS = 4.0           # 시스템 손실 계수 (lbf·s²/lbm·ft⁵)

# ──────────────────────────────────────────────
# ? 슬라이더 범위 (최솟값, 최댓값)
#   입구 측 파라미터의 기본값은 범위의 중앙값
# ──────────────────────────────────────────────
PARAMETER_RANGES = {
    "z1":   (-100.0, 100.0),   # ft
    "A1":   (0.05, 1.0),       # ft²
    "P1":   (0.0, 150.0),      # psia
    "nu":   (0.0160, 0.0338),  # ft³/lbm
    "ksys": (0.01, 20.0),      # lbf·s²/lbm·ft⁵
}


def range_midpoint(name: str) -> float:
    """슬라이더 범위의 중앙값"""
    lo, hi = PARAMETER_RANGES[name]
    return (lo + hi) / 2.0


DEFAULT_Z1_FT = range_midpoint("z1")      # 0 ft
DEFAULT_A1_FT2 = range_midpoint("A1")     # 0.525 ft²
DEFAULT_P1_PSIA = range_midpoint("P1")    # 75 psia

# ──────────────────────────────────────────────
# ? 유량 샘플 격자 & 펌프 곡선
# ──────────────────────────────────────────────
DEFAULT_NUM_SAMPLES = 100     # 곡선당 샘플 수
MIN_NUM_SAMPLES = 2
MAX_NUM_SAMPLES = 10000
DEFAULT_VDOT_MIN = 0.0        # 최소 유량 (ft³/s)
DEFAULT_VDOT_MAX = 12.0       # 펌프 최대 유량 = 샘플 최대 유량 (ft³/s)
DEFAULT_HP_MAX = 400.0        # 체절 양정 (ft·lbf/lbm)

# ──────────────────────────────────────────────
# ? 운전점 검증 허용 오차
#   보간된 펌프 양정과 시스템 부하의 차이 허용 한계 (ft·lbf/lbm)
#   100개 격자에서 선형 보간 오차는 수 1e-2 수준
# ──────────────────────────────────────────────
OPERATING_POINT_TOLERANCE = 1e-1

# ──────────────────────────────────────────────
# ? 결과 상태 코드
# ──────────────────────────────────────────────
STATUS_FOUND = "found"
STATUS_NO_INTERSECTION = "no_intersection"
STATUS_MISMATCH = "mismatch"
