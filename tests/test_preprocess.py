from paraxref.preprocess import inject_hypertargets


def test_hypertargets_outside_math():
    source = r"""
\section{Intro}\label{sec:intro}
\begin{equation}
a = b \label{eq:ab}
\end{equation}
\begin{theorem}\label{thm:main}
Text.
\end{theorem}
"""
    result = inject_hypertargets(source)

    assert r"\label{sec:intro}\hypertarget{sec:intro}{}" in result
    assert r"\label{thm:main}\hypertarget{thm:main}{}" in result
    assert r"\hypertarget{eq:ab}" not in result


def test_source_without_labels_unchanged():
    source = r"\section{Intro} Some text."
    assert inject_hypertargets(source) == source


def test_document_labels(source_text):
    result = inject_hypertargets(source_text)
    assert result.count(r"\hypertarget{") == 9
