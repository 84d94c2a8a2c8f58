"""対話プレビュー用の状態とクロック。"""
