"""
Smoke tests：驗證套件可匯入、版本與公開 API 存在。
"""


def test_import_package():
    """套件可正常匯入"""
    import figma2code
    assert figma2code.__version__ == "0.1.0"


def test_public_api():
    """公開 API 可從 figma2code 取得"""
    from figma2code import (
        __version__,
        DesignSession,
        FrameworkConfig,
        analyze,
        generate_code,
        load_config,
        load_library,
        map_components,
        parse,
        run_pipeline,
        validate,
    )
    assert __version__ == "0.1.0"
    for fn in (analyze, generate_code, load_config, load_library, map_components, parse, run_pipeline, validate):
        assert callable(fn)
    assert FrameworkConfig().name == "react"
    assert DesignSession().parsed is None


def test_all_exports_resolve():
    """__all__ 內每個名稱都存在"""
    import figma2code
    missing = [name for name in figma2code.__all__ if not hasattr(figma2code, name)]
    assert missing == []


def test_run_pipeline_minimal():
    """最小設計檔 + 元件庫可跑完整條管線"""
    from builders import button_document, button_library
    from figma2code import run_pipeline

    report = run_pipeline(button_document(), button_library())
    assert report.summary()["generated"] == 1
