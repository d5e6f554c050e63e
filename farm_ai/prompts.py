"""Prompt builders for the Gemini calls.

The farmers using the assistant work in Turkish, so every prompt is written
in Turkish and asks for Turkish free text inside a JSON envelope.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from farm_engine.const import TURKISH_MONTHS
from farm_engine.models import CropType, Field, SoilAnalysisResult

__all__ = [
    "SOIL_RESPONSE_SCHEMA",
    "analysis_tasks_prompt",
    "schedule_prompt",
    "soil_prompt",
    "weather_prompt",
]

_LEVELS = ["Low", "Optimal", "High"]
_TASK_TYPES = '"FERTILIZER" | "IRRIGATION" | "PESTICIDE" | "PLANTING" | "HARVEST"'

# OpenAPI subset accepted by ``generationConfig.responseSchema``
SOIL_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "ph": {"type": "NUMBER", "description": "Toprak pH değeri (0-14)"},
        "nitrogen": {"type": "STRING", "enum": _LEVELS},
        "phosphorus": {"type": "STRING", "enum": _LEVELS},
        "potassium": {"type": "STRING", "enum": _LEVELS},
        "organicMatter": {"type": "NUMBER", "description": "Organik madde yüzdesi"},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
        "calculatedFertilizerAmount": {"type": "STRING", "description": "Örn: 15 kg/dekar DAP"},
        "idealPlantingTime": {"type": "STRING", "description": "Örn: Kasım başı"},
    },
    "required": [
        "ph",
        "nitrogen",
        "phosphorus",
        "potassium",
        "organicMatter",
        "recommendations",
        "calculatedFertilizerAmount",
        "idealPlantingTime",
    ],
}


def _long_date(value: date) -> str:
    return f"{value.day} {TURKISH_MONTHS[value.month - 1]} {value.year}"


def _yes_no(flag: bool) -> str:
    return "Var" if flag else "Yok"


def soil_prompt(crop_type: CropType, size_decares: float) -> str:
    return f"""
Sen uzman bir ziraat mühendisisin. Görüntü bir toprak analizi raporu ya da toprak fotoğrafıdır.

Ekilecek ürün: {crop_type.value}
Tarla büyüklüğü: {size_decares:g} dekar

1. pH, azot, fosfor, potasyum ve organik madde değerlerini rapordan oku ya da tahmin et.
2. {crop_type.value} için Türkiye iklimine uygun gübreleme önerileri ver.
3. Dekar başına atılacak gübre tipini ve miktarını belirt.
4. Ürün için ideal ekim zamanını yaz (örn: 'Kasım başı').

Yanıtı yalnızca istenen JSON şemasında ver.
""".strip()


def schedule_prompt(
    crop_type: CropType,
    location: str,
    has_irrigation: bool,
    plant_date: date,
    today: date,
) -> str:
    return f"""
Aşağıdaki bilgilere göre bir zirai takvim ve uygunluk değerlendirmesi hazırla.
- Bugünün tarihi: {today.isoformat()}
- Ürün: {crop_type.value}
- Konum: {location}
- Sulama sistemi: {_yes_no(has_irrigation)}
- Planlanan işlem tarihi: {plant_date.isoformat()}

Kurallar:
1. {location} ikliminin bu ürün ve tarih için uygun olup olmadığını değerlendir.
2. Uygun değilse "warning" alanına kısa bir açıklama yaz ve "tasks" listesini boş bırak.
3. Uygunsa önümüzdeki sezonun görevlerini kesin tarihlerle (YYYY-MM-DD) listele.
4. Ekim (PLANTING) ve hasat (HARVEST) bir tarih aralığıdır; bunlar için "endDate" zorunludur.

Yalnızca şu JSON biçiminde yanıt ver:
{{"tasks": [{{"title": "...", "type": {_TASK_TYPES}, "date": "YYYY-MM-DD", "endDate": "YYYY-MM-DD", "description": "..."}}], "warning": null}}
""".strip()


def analysis_tasks_prompt(field: Field, analysis: SoilAnalysisResult, today: date) -> str:
    recommendations = ", ".join(analysis.recommendations) or "Yok"
    return f"""
Sen uzman bir ziraat mühendisisin.

Girdiler:
- Bugünün tarihi: {_long_date(today)} ({today.isoformat()})
- Konum: {field.location} (bölge iklimini mutlaka dikkate al)
- Ürün: {field.crop_type.value}
- Sulama: {_yes_no(field.has_irrigation)}
- Analiz önerileri: {recommendations}
- Gübre miktarı: {analysis.calculated_fertilizer_amount}
- İdeal ekim zamanı: {analysis.ideal_planting_time or "Belirtilmemiş"}

Bu tarla için takvime dayalı, gerçekçi bir tarım planı oluştur.
1. Göreli gün sayısı kullanma; her görev için kesin tarih (YYYY-MM-DD) ver.
2. {today.isoformat()} tarihinden önceye görev koyma; gerekiyorsa yılı ilerlet.
3. Ekim (PLANTING) ve hasat (HARVEST) için "endDate" ile bir zaman penceresi belirt.

Yalnızca şu JSON biçiminde yanıt ver:
[{{"title": "Görev başlığı", "type": {_TASK_TYPES}, "date": "YYYY-MM-DD", "endDate": "YYYY-MM-DD", "description": "Açıklama ve miktar"}}]
""".strip()


def weather_prompt(location: str) -> str:
    return f"""
"{location}" için Meteoroloji Genel Müdürlüğü (mgm.gov.tr) kaynaklı güncel hava durumunu bul.
Varsa bu konuma ya da Türkiye geneline ait güncel bir radar veya uydu görüntüsü adresi ekle.

Yalnızca şu JSON biçiminde yanıt ver:
{{"temp": 0, "condition": "kısa Türkçe durum", "humidity": 0, "windSpeed": 0, "rainChance": 0, "radarImageUrl": null}}
""".strip()
