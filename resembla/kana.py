"""Kana normalisation, pronunciation estimation and romaji conversion."""

from __future__ import annotations

from typing import Sequence

NO_PRONUNCIATION = "*"
SOKUON = "ッ"


def _build_kana_map() -> dict[str, str]:
    kana: dict[str, str] = {}
    # Hiragana ぁ..ゖ map onto katakana ァ..ヶ.
    for cp in range(0x3041, 0x3097):
        kana[chr(cp)] = chr(cp + 0x60)
    # Katakana ァ..ヶ map onto themselves.
    for cp in range(0x30A1, 0x30F7):
        kana[chr(cp)] = chr(cp)
    kana.update({
        "ゐ": "イ",
        "ゑ": "エ",
        "ゟ": "ヨリ",
        "ゝ": "ヽ",
        "ゞ": "ヾ",
        "ヰ": "イ",
        "ヱ": "エ",
        "ヿ": "コト",
    })
    return kana


KANA_MAP: dict[str, str] = _build_kana_map()

_BASE_ROMAJI = {
    "ァ": "a", "ア": "A", "ィ": "i", "イ": "I", "ゥ": "u", "ウ": "U",
    "ェ": "e", "エ": "E", "ォ": "o", "オ": "O",
    "カ": "KA", "ガ": "GA", "キ": "KI", "ギ": "GI", "ク": "KU", "グ": "GU",
    "ケ": "KE", "ゲ": "GE", "コ": "KO", "ゴ": "GO",
    "サ": "SA", "ザ": "ZA", "シ": "SI", "ジ": "ZI", "ス": "SU", "ズ": "ZU",
    "セ": "SE", "ゼ": "ZE", "ソ": "SO", "ゾ": "ZO",
    "タ": "TA", "ダ": "DA", "チ": "TI", "ヂ": "DI", "ッ": "tu", "ツ": "TU",
    "ヅ": "DU", "テ": "TE", "デ": "DE", "ト": "TO", "ド": "DO",
    "ナ": "NA", "ニ": "NI", "ヌ": "NU", "ネ": "NE", "ノ": "NO",
    "ハ": "HA", "バ": "BA", "パ": "PA", "ヒ": "HI", "ビ": "BI", "ピ": "PI",
    "フ": "HU", "ブ": "BU", "プ": "PU", "ヘ": "HE", "ベ": "BE", "ペ": "PE",
    "ホ": "HO", "ボ": "BO", "ポ": "PO",
    "マ": "MA", "ミ": "MI", "ム": "MU", "メ": "ME", "モ": "MO",
    "ャ": "ya", "ヤ": "YA", "ュ": "yu", "ユ": "YU", "ョ": "yo", "ヨ": "YO",
    "ラ": "RA", "リ": "RI", "ル": "RU", "レ": "RE", "ロ": "RO",
    "ヮ": "wa", "ワ": "WA", "ヲ": "WO", "ン": "n",
    "ヴァ": "VA", "ヴィ": "VI", "ヴ": "VU", "ヴェ": "VE", "ヴォ": "VO",
    "ヵ": "ka", "ヶ": "ke", "ー": "-",
    "キャ": "Kya", "ギャ": "Gya", "キュ": "Kyu", "ギュ": "Gyu",
    "キョ": "Kyo", "ギョ": "Gyo",
    "シャ": "Sya", "ジャ": "Zya", "シュ": "Syu", "ジュ": "Zyu",
    "ショ": "Syo", "ジョ": "Zyo",
    "チャ": "Tya", "ヂャ": "Dya", "チュ": "Tyu", "ヂュ": "Dyu",
    "チョ": "Tyo", "ヂョ": "Dyo",
    "ニャ": "Nya", "ニュ": "Nyu", "ニョ": "Nyo",
    "ヒャ": "Hya", "ビャ": "Bya", "ピャ": "Pya", "ヒュ": "Hyu", "ビュ": "Byu",
    "ピュ": "Pyu", "ヒョ": "Hyo", "ビョ": "Byo", "ピョ": "Pyo",
    "ミャ": "Mya", "ミュ": "Myu", "ミョ": "Myo",
    "リャ": "Rya", "リュ": "Ryu", "リョ": "Ryo",
    "クヮ": "Kwa", "グヮ": "Gwa",
    "ウィ": "ui", "ウェ": "ue", "ウォ": "uo",
    "チェ": "Tie", "ティ": "Tei",
    "ファ": "Hua", "フィ": "Hui", "フェ": "Hue", "フォ": "Huo",
}

# A sokuon followed by these doubles the consonant of the next syllable.
_GEMINABLE = (
    "カガキギクグケゲコゴサザシジスズセゼソゾタダチヂツヅテデトド"
    "ナニヌネノハバパヒビピフブプヘベペホボポマミムメモヤユヨラリルレロワヲヴ"
)

ROMAJI_MAP: dict[str, str] = {
    **_BASE_ROMAJI,
    **{SOKUON + k: _BASE_ROMAJI[k][0].lower() + _BASE_ROMAJI[k] for k in _GEMINABLE},
}


def is_kana_word(word: str) -> bool:
    """Return True if every letter of ``word`` is a known kana."""
    return all(c in KANA_MAP for c in word)


def estimate_pronunciation(word: str) -> str:
    """Convert the kana of ``word`` to katakana, leaving other letters as they are."""
    return "".join(
        KANA_MAP.get(d, d)
        for c in word
        for d in KANA_MAP.get(c, c)
    )


def _parse_feature(feature: str) -> list[str]:
    # Empty comma-separated fields are dropped, as the analyser output is read.
    return [field for field in feature.split(",") if field]


def token_pronunciation(surface: str, feature: Sequence[str] | str,
                        feature_pos: int = 7,
                        pronunciation_of_marks: str = "") -> str:
    """Return the katakana pronunciation of one analysed token.

    ``feature`` is the token's feature list, or its comma-separated form.
    The reading at ``feature_pos`` is used unless it is missing or ``*`` or
    the surface is all kana, in which case the surface is converted. A
    reading equal to ``pronunciation_of_marks`` yields the surface itself.
    """
    fields = _parse_feature(feature) if isinstance(feature, str) else list(feature)
    reading = fields[feature_pos] if feature_pos < len(fields) else ""

    if not reading or reading == NO_PRONUNCIATION or is_kana_word(surface):
        return estimate_pronunciation(surface)
    if reading == pronunciation_of_marks:
        return surface
    return "".join(KANA_MAP.get(c, c) for c in reading)


def _lower_ascii(text: str) -> str:
    return "".join(chr(ord(c) + 32) if "A" <= c <= "Z" else c for c in text)


def to_romaji(pronunciation: str, keep_case: bool = False) -> str:
    """Convert a katakana pronunciation to romaji.

    With ``keep_case`` the capitals marking syllable heads are kept;
    otherwise the output is in lower case.
    """
    pieces: list[str] = []
    i = 0
    size = len(pronunciation)
    while i < size:
        p = pronunciation[i]
        if i + 1 < size:
            q = p + pronunciation[i + 1]
            if q in ROMAJI_MAP:
                if p == SOKUON:
                    # Only the sokuon is consumed; the next letter may join with its successor.
                    p = ROMAJI_MAP[q][0]
                else:
                    p = q
                    i += 1
        pieces.append(ROMAJI_MAP.get(p, p))
        i += 1
    result = "".join(pieces)
    return result if keep_case else _lower_ascii(result)