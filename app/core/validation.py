# app/core/validation.py

"""
여러 도메인이 공유하는 입력 검증 규칙 모듈입니다.

각 도메인 서비스는 엔티티별 규칙 집합(_validate_xxx)에서 이 함수들을 조합하여
쓰기 경로마다 한 번만 검증을 수행합니다. 위반 시 BusinessRuleError를 발생시킵니다.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import BusinessRuleError

# 볼리비아의 9개 주(Departamento)
VALID_DEPARTMENTS = (
    "La Paz",
    "Cochabamba",
    "Santa Cruz",
    "Oruro",
    "Potosí",
    "Chuquisaca",
    "Tarija",
    "Beni",
    "Pando",
)

PHONE_PATTERN = re.compile(r"^[\d\s\-\+\(\)]+$")
PHONE_MIN_LENGTH = 7
PHONE_MAX_LENGTH = 20


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_length(value: Optional[str], min_length: int, max_length: int, message: str) -> str:
    """공백이 아닌 문자열의 길이가 [min_length, max_length] 범위인지 확인합니다."""
    if is_blank(value) or len(value) < min_length or len(value) > max_length:
        raise BusinessRuleError(message)
    return value


def max_length(value: Optional[str], limit: int, message: str) -> Optional[str]:
    """선택 입력 문자열이 주어진 경우에만 최대 길이를 확인합니다."""
    if not is_blank(value) and len(value) > limit:
        raise BusinessRuleError(message)
    return value


def validate_department(value: Optional[str]) -> str:
    """
    주(Departamento) 명칭을 대소문자 구분 없이 검증하고 표준 표기로 반환합니다.
    """
    if is_blank(value):
        raise BusinessRuleError("El departamento es requerido")

    for department in VALID_DEPARTMENTS:
        if department.casefold() == value.strip().casefold():
            return department

    raise BusinessRuleError(
        f"El departamento '{value}' no es válido. "
        f"Debe ser uno de: {', '.join(VALID_DEPARTMENTS)}"
    )


def validate_phone(value: Optional[str], subject: str = "El teléfono") -> str:
    """전화번호 길이(7~20자)와 허용 문자(숫자, 공백, + - ( ))를 확인합니다."""
    if is_blank(value) or not (PHONE_MIN_LENGTH <= len(value) <= PHONE_MAX_LENGTH):
        raise BusinessRuleError(f"{subject} debe tener entre {PHONE_MIN_LENGTH} y {PHONE_MAX_LENGTH} caracteres")
    if not PHONE_PATTERN.match(value):
        raise BusinessRuleError(f"{subject} solo puede contener dígitos, espacios y los caracteres: + - ( )")
    return value


def validate_email_format(value: Optional[str]) -> str:
    """이메일 형식을 검증합니다. (도메인 실존 여부는 확인하지 않음)"""
    if is_blank(value):
        raise BusinessRuleError("El email es requerido")
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise BusinessRuleError("El email no tiene un formato válido")
    return value


def email_domain(value: str) -> str:
    return value.rsplit("@", 1)[-1].lower()


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    """위도/경도는 둘 다 입력하거나 둘 다 생략해야 하며, 유효 범위 안에 있어야 합니다."""
    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        raise BusinessRuleError("Debe proporcionar tanto la latitud como la longitud")
    if not -90 <= latitude <= 90:
        raise BusinessRuleError("La latitud debe estar entre -90 y 90")
    if not -180 <= longitude <= 180:
        raise BusinessRuleError("La longitud debe estar entre -180 y 180")
