"""Checks on morphological-analyser option strings."""

from __future__ import annotations


def validate_mecab_options(options: str) -> str:
    """Return ``options`` unchanged after checking the dictionary it names.

    The directory given after ``-d``/``--dicdir`` must hold a readable
    ``dicrc`` file. Only the first such option is checked.
    """
    dict_option_found = False
    for token in options.split(" "):
        if not token:
            continue
        if dict_option_found:
            dict_path = token + "/dicrc"
            try:
                with open(dict_path, "rb"):
                    pass
            except OSError as err:
                raise FileNotFoundError(
                    f"MeCab dictionary is not available: {dict_path}"
                ) from err
            dict_option_found = False
            break
        if token in ("-d", "--dicdir"):
            dict_option_found = True
    if dict_option_found:
        raise ValueError("-d option is used without dictionary path")
    return options