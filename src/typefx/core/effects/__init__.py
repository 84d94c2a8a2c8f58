"""組み込み effect 群（各モジュールが import 時に registry へ登録される）。"""
