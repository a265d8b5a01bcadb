from __future__ import annotations

import random

# Two to four syllable everyday words. Duplicates are dropped when the pool is built.
DEFAULT_WORDS_KO = [
    "사과", "바다", "하늘", "땅", "꽃", "눈", "비", "산", "강", "책",
    "집", "차", "물", "불", "달", "별", "돈", "밥", "옷", "신",
    "손", "발", "머리", "코", "입", "귀", "목", "팔", "다리",
    "바나나", "딸기", "포도", "사람", "학교", "친구", "가족", "나라", "도시", "거리",
    "소리", "마음", "생각", "시간", "공부", "운동", "음식", "음악", "영화", "여행",
    "컴퓨터", "전화", "자동차", "자전거", "비행기", "지하철", "기차", "버스", "택시", "병원",
    "오렌지", "파인애플", "사과나무", "바닷가", "국제선", "하늘색", "자연환경", "주말여행", "인터넷", "도서관",
    "대학교", "초등학교", "중학교", "고등학교", "대학원", "식당", "영화관", "백화점", "슈퍼마켓", "편의점",
    "놀이공원", "동물원", "식물원", "미술관", "박물관", "공원", "수영장", "운동장", "도로",
    "가방", "연필", "지우개", "필통", "노트", "공책", "연습장", "색연필", "크레파스", "수첩",
    "카메라", "스마트폰", "태블릿", "노트북", "마우스", "키보드", "모니터", "프린터", "스캐너", "이어폰",
    "헤드폰", "스피커", "충전기", "배터리", "케이블", "어댑터", "메모리", "하드", "디스크", "카드",
    "안경", "시계", "지갑", "열쇠", "우산", "모자", "장갑", "목도리", "스카프", "넥타이",
    "거울", "빗", "화장품", "립스틱", "향수", "로션", "샴푸", "린스", "비누", "치약",
    "칫솔", "수건", "휴지", "장난감", "인형", "로봇", "퍼즐", "블록", "게임기", "공",
]

# Hangul syllable composition: 0xAC00 + (initial * 21 + medial) * 28 + final
_INITIALS = 19
_MEDIALS = 21
_FINALS = 28


def _unique(words: list[str]) -> list[str]:
    return list(dict.fromkeys(w for w in words if w))


def random_syllable_word(rng: random.Random | None = None) -> str:
    r = rng or random
    length = r.randint(2, 4)
    chars = []
    for _ in range(length):
        code = 0xAC00 + (r.randrange(_INITIALS) * _MEDIALS + r.randrange(_MEDIALS)) * _FINALS + r.randrange(_FINALS)
        chars.append(chr(code))
    return "".join(chars)


def pick_words(words: list[str], count: int, rng: random.Random | None = None) -> list[str]:
    pool = _unique(words)
    if count <= 0 or not pool:
        return []
    r = rng or random
    if count >= len(pool):
        r.shuffle(pool)
        return pool
    return r.sample(pool, count)


def generate_words(count: int, rng: random.Random | None = None) -> list[str]:
    """Return ``count`` distinct words, topping up with random syllables if the pool runs out."""
    words = pick_words(DEFAULT_WORDS_KO, count, rng=rng)
    seen = set(words)
    while len(words) < count:
        word = random_syllable_word(rng)
        if word not in seen:
            seen.add(word)
            words.append(word)
    return words
