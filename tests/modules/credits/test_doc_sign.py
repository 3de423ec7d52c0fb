# -*- coding: utf-8 -*-
"""
backend/tests/modules/credits/test_doc_sign.py
"""

import pytest

from app.modules.credits.enums import sign_for_doc_type


@pytest.mark.parametrize(
    "doc_type, sign",
    [
        ("investment", -1),
        ("adjust_down", -1),
        (" Adjust_Down ", -1),
        ("receipt", 1),
        ("adjust_up", 1),
        ("manual", 1),
        ("cualquier_cosa", 1),
        (None, 1),
    ],
)
def test_sign_for_doc_type(doc_type, sign):
    assert sign_for_doc_type(doc_type) == sign
