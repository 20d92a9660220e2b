"""
どこで: `engine.core` サブパッケージ。
何を: 数値型の契約・Point/Vector/Matrix の線形代数・スクリーンコンテキストを提供。
なぜ: 描画やフレーム生成から独立した計算の基盤を構成し、上位層（render/runtime/api）から再利用するため。
"""
